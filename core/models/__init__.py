# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - todo.py: Todo records, status enumeration, list results
# - user.py: Identity and auth request/response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .todo import (
    AttachmentUrlResponse,
    ImageUpload,
    StatusUpdateRequest,
    Todo,
    TodoList,
    TodoStatus,
)
from .user import (
    Identity,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    normalize_email,
)

__all__ = [
    "AttachmentUrlResponse",
    "ImageUpload",
    "StatusUpdateRequest",
    "Todo",
    "TodoList",
    "TodoStatus",
    "Identity",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    "normalize_email",
]
