# =============================================================================
# core/models/user.py - User & Identity Schemas
# =============================================================================
# - Identity: The minimal authenticated-user record for one request
# - RegisterRequest / LoginRequest: Inputs for the auth routes
# - UserResponse: Public view of a user (never includes the password hash)
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Identity(BaseModel):
    """
    Authenticated user established for the duration of one request.

    Built from a verified session token or from a successful credential
    check. Passed explicitly into every service operation.
    """
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_user_row(cls, row: dict[str, Any]) -> "Identity":
        return cls(
            id=str(row["id"]),
            name=row.get("name"),
            email=row.get("email"),
            image=row.get("image"),
        )


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively and without surrounding spaces."""
    return email.strip().lower()


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Ann"])
    email: str = Field(..., min_length=3, max_length=254, examples=["ann@x.com"])
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        v = normalize_email(v)
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must be a valid address")
        return v


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public user profile returned by the auth routes."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "UserResponse":
        return cls(**identity.model_dump())
