# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for the users/todos tables
# =============================================================================

from lib.supabase_client import SupabaseClient

__all__ = [
    "SupabaseClient",
]
