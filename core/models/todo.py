# =============================================================================
# core/models/todo.py - Todo Schemas
# =============================================================================
# These models define the API contract for todo operations:
# - TodoStatus: Closed enumeration of todo states
# - Todo: A persisted todo record as returned to clients
# - TodoList: Result of listing todos (data + separate error signal)
# - StatusUpdateRequest: Input for changing a todo's status
# - ImageUpload: An attachment received with a create request
#
# Every todo belongs to exactly one user (user_id). Services only ever read
# or write todos scoped to the acting identity.
# =============================================================================

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TodoStatus(str, Enum):
    """
    Possible states for a todo.

    Flow: InProgress <-> Done

    A todo is `completed` exactly when its status is Done.
    """
    IN_PROGRESS = "InProgress"
    DONE = "Done"

    @property
    def completed(self) -> bool:
        return self is TodoStatus.DONE

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Todo(BaseModel):
    """
    Schema for returning todo data to clients.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "content": "Buy milk",
            "completed": false,
            "status": "InProgress",
            "image_url": null,
            "created_at": "2024-01-15T10:30:00Z",
            "user_id": "660e8400-e29b-41d4-a716-446655440001"
        }
    """

    id: str = Field(
        ...,
        description="Unique todo identifier"
    )

    content: str = Field(
        ...,
        description="Free text describing the todo"
    )

    completed: bool = Field(
        default=False,
        description="True exactly when status is Done"
    )

    status: TodoStatus = Field(
        default=TodoStatus.IN_PROGRESS,
        description="Current todo status"
    )

    # Public URL of the attached image, if any
    image_url: str | None = Field(
        default=None,
        description="Attachment reference (public URL) or null"
    )

    created_at: datetime = Field(
        ...,
        description="Timestamp when the todo was created"
    )

    user_id: str = Field(
        ...,
        description="ID of the owning user"
    )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Todo":
        """Build a Todo from a `todos` table row."""
        return cls(
            id=str(row["id"]),
            content=row["content"],
            completed=bool(row.get("completed", False)),
            status=row.get("status") or TodoStatus.IN_PROGRESS,
            image_url=row.get("image_url"),
            created_at=row["created_at"],
            user_id=str(row["user_id"]),
        )


class TodoList(BaseModel):
    """
    Result of listing a user's todos.

    `error` is set when the fetch failed, so callers can tell a failure
    (todos == [] and error set) apart from a legitimately empty list.
    """

    todos: list[Todo] = Field(default_factory=list)
    error: str | None = None


class StatusUpdateRequest(BaseModel):
    """Request body for PATCH /todos/{id}/status."""

    status: TodoStatus = Field(
        ...,
        description="New status (InProgress or Done)"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [{"status": "Done"}, {"status": "InProgress"}]
        }
    }


class AttachmentUrlResponse(BaseModel):
    """Short-lived URL for reading a todo's attachment."""

    todo_id: str
    url: str
    expires_in: int


@dataclass
class ImageUpload:
    """An image received alongside a create request."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data
