# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - todos.py: Todo CRUD and attachment endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import todos

__all__ = [
    "health",
    "todos",
]
