# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import CredentialVerifier, hash_password, verify_password
from .registration_service import RegistrationService
from .storage_service import StorageService
from .todo_service import TodoService

__all__ = [
    "CredentialVerifier",
    "hash_password",
    "verify_password",
    "RegistrationService",
    "StorageService",
    "TodoService",
]
