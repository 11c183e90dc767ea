# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Database rows map onto models
# =============================================================================

from datetime import datetime

import pytest
from pydantic import ValidationError

from core.models import (
    Identity,
    ImageUpload,
    RegisterRequest,
    StatusUpdateRequest,
    Todo,
    TodoList,
    TodoStatus,
    UserResponse,
)


# =============================================================================
# TodoStatus
# =============================================================================

class TestTodoStatus:
    """Tests for the TodoStatus enumeration."""

    def test_exactly_two_members(self):
        assert TodoStatus.values() == ["InProgress", "Done"]

    def test_completed_follows_status(self):
        assert TodoStatus.DONE.completed is True
        assert TodoStatus.IN_PROGRESS.completed is False

    def test_status_request_rejects_unknown_values(self):
        with pytest.raises(ValidationError):
            StatusUpdateRequest(status="In Progress")

        assert StatusUpdateRequest(status="Done").status is TodoStatus.DONE


# =============================================================================
# Todo
# =============================================================================

class TestTodo:
    """Tests for Todo.from_db_row."""

    @pytest.fixture
    def row(self):
        return {
            "id": "todo-1",
            "content": "Buy milk",
            "completed": False,
            "status": "InProgress",
            "image_url": None,
            "created_at": "2024-01-15T10:30:00Z",
            "user_id": "user-ann",
        }

    def test_from_db_row(self, row):
        todo = Todo.from_db_row(row)

        assert todo.id == "todo-1"
        assert todo.status is TodoStatus.IN_PROGRESS
        assert isinstance(todo.created_at, datetime)
        assert todo.image_url is None

    def test_from_db_row_defaults(self, row):
        """Missing status/completed fall back to the initial state."""
        del row["status"]
        del row["completed"]

        todo = Todo.from_db_row(row)

        assert todo.status is TodoStatus.IN_PROGRESS
        assert todo.completed is False

    def test_serializes_status_as_string(self, row):
        assert Todo.from_db_row(row).model_dump(mode="json")["status"] == "InProgress"

    def test_todo_list_defaults(self):
        result = TodoList()

        assert result.todos == []
        assert result.error is None


# =============================================================================
# Users
# =============================================================================

class TestUserModels:
    """Tests for Identity and the auth request models."""

    def test_identity_is_frozen(self):
        identity = Identity(id="user-ann", name="Ann")

        with pytest.raises(ValidationError):
            identity.name = "Bob"

    def test_identity_from_user_row_drops_password(self):
        identity = Identity.from_user_row({
            "id": "user-ann",
            "name": "Ann",
            "email": "ann@x.com",
            "password": "$2b$10$hash",
            "image": None,
        })

        assert "password" not in identity.model_dump()

    def test_register_request_normalizes(self):
        request = RegisterRequest(name=" Ann ", email=" Ann@X.com ", password="secret1")

        assert request.name == "Ann"
        assert request.email == "ann@x.com"

    @pytest.mark.parametrize("data", [
        {"name": "   ", "email": "ann@x.com", "password": "secret1"},
        {"name": "Ann", "email": "ann.x.com", "password": "secret1"},
        {"name": "Ann", "email": "ann@x.com", "password": "123"},
    ])
    def test_register_request_rejects(self, data):
        with pytest.raises(ValidationError):
            RegisterRequest(**data)

    def test_user_response_from_identity(self):
        identity = Identity(id="user-ann", name="Ann", email="ann@x.com")

        assert UserResponse.from_identity(identity).id == "user-ann"

    def test_image_upload_empty(self):
        assert ImageUpload(filename="", content_type=None, data=b"").is_empty
        assert ImageUpload(filename="a.png", content_type="image/png", data=b"x").size == 1
