# =============================================================================
# app/exceptions.py - Custom Exceptions & Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Messages returned to clients are generic. Raw database/storage errors are
# logged where they happen and never copied into a response body.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.config import settings

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class TodoAppException(Exception):
    """
    Base exception for the todo API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "TODO_APP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authentication Exceptions
# =============================================================================

class UnauthenticatedError(TodoAppException):
    """Raised when a protected operation is invoked without a valid session."""

    def __init__(self):
        super().__init__(
            message="Authentication required",
            code="UNAUTHENTICATED",
            status_code=401,
            suggestion=f"Log in via POST {LOGIN_PATH} and retry",
        )


class InvalidCredentialsError(TodoAppException):
    """Raised when email/password do not match a stored user."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check your email and password",
        )


class UserAlreadyExistsError(TodoAppException):
    """Raised when registering with an email that is already taken."""

    def __init__(self):
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=409,
            suggestion="Log in instead, or register with a different email",
        )


class PasswordTooLongError(TodoAppException):
    """Raised when a password exceeds what bcrypt can hash."""

    def __init__(self, max_bytes: int):
        super().__init__(
            message=f"Password is too long (max {max_bytes} bytes)",
            code="PASSWORD_TOO_LONG",
            status_code=400,
            suggestion="Choose a shorter password",
            details={"max_bytes": max_bytes},
        )


# =============================================================================
# Todo Exceptions
# =============================================================================

class TodoNotFoundError(TodoAppException):
    """Raised when a todo ID doesn't exist."""

    def __init__(self, todo_id: str):
        super().__init__(
            message=f"Todo not found: {todo_id}",
            code="TODO_NOT_FOUND",
            status_code=404,
            suggestion="Check that the todo_id is correct",
            details={"todo_id": todo_id},
        )


class TodoOwnershipError(TodoAppException):
    """Raised when the acting user does not own the target todo."""

    def __init__(self, todo_id: str):
        super().__init__(
            message="You do not have access to this todo",
            code="TODO_FORBIDDEN",
            status_code=403,
            details={"todo_id": todo_id},
        )


class EmptyContentError(TodoAppException):
    """Raised when a todo is created without any content."""

    def __init__(self):
        super().__init__(
            message="Todo content must not be empty",
            code="EMPTY_CONTENT",
            status_code=400,
            suggestion="Provide some text describing the todo",
        )


class InvalidStatusError(TodoAppException):
    """Raised when a status value is not one of the known statuses."""

    def __init__(self, value: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid status: {value}",
            code="INVALID_STATUS",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"allowed": allowed},
        )


# =============================================================================
# Attachment Exceptions
# =============================================================================

class InvalidImageError(TodoAppException):
    """Raised when an attachment is not an allowed image type."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Unsupported attachment type: {content_type or 'unknown'}",
            code="INVALID_IMAGE_TYPE",
            status_code=400,
            suggestion=f"Only these image types are supported: {', '.join(allowed)}",
            details={"allowed_types": allowed},
        )


class ImageTooLargeError(TodoAppException):
    """Raised when an attachment exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Attach an image smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class NoAttachmentError(TodoAppException):
    """Raised when a signed URL is requested for a todo without attachment."""

    def __init__(self, todo_id: str):
        super().__init__(
            message=f"Todo has no attachment: {todo_id}",
            code="NO_ATTACHMENT",
            status_code=404,
            details={"todo_id": todo_id},
        )


# =============================================================================
# Backend Exceptions
# =============================================================================

class StorageError(TodoAppException):
    """
    Raised when the attachment store fails.

    `operation` is one of "upload", "delete", "sign".
    """

    def __init__(self, operation: str, key: str | None = None):
        super().__init__(
            message=f"Attachment storage {operation} failed",
            code=f"STORAGE_{operation.upper()}_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
        )
        self.operation = operation
        self.key = key


class PersistenceError(TodoAppException):
    """Raised when a database operation fails."""

    def __init__(self, operation: str):
        super().__init__(
            message="A database error occurred",
            code="PERSISTENCE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )
        self.operation = operation


# =============================================================================
# Exception Handlers
# =============================================================================

async def todo_app_exception_handler(
    request: Request,
    exc: TodoAppException
) -> JSONResponse:
    """
    Convert TodoAppException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def wants_json(request: Request) -> bool:
    """True when the client asked for JSON rather than an HTML page."""
    accept = (request.headers.get("accept") or "").lower()
    return "application/json" in accept


def login_redirect(request: Request, clear_session: bool = False):
    """
    Send the caller to the login surface.

    Browsers get a redirect; JSON clients get a 401 body that names the
    redirect target. With `clear_session`, stale session cookies are
    dropped so the login page is reachable again.
    """
    if wants_json(request):
        content = UnauthenticatedError().to_dict()
        content["redirect"] = LOGIN_PATH
        response = JSONResponse(status_code=401, content=content)
    else:
        response = RedirectResponse(url=LOGIN_PATH, status_code=303)

    if clear_session:
        for name in settings.session_cookie_names:
            response.delete_cookie(name, path="/")
    return response


async def unauthenticated_exception_handler(
    request: Request,
    exc: UnauthenticatedError
):
    """
    Handle requests that reached a protected operation without a valid
    session. A cookie may be present but expired or tampered, so it is
    cleared along with the redirect.
    """
    return login_redirect(request, clear_session=True)


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = exc.errors() if hasattr(exc, "errors") else []
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                for err in errors
            ],
        }
    )
