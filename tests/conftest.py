# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-ins for the Supabase tables and the storage bucket,
#   patched into every service module that talks to them
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("STORAGE_BUCKET", "todo-attachments")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from app.exceptions import PersistenceError, StorageError, UserAlreadyExistsError
from core.models.todo import ImageUpload
from core.models.user import Identity
from core.services.storage_service import StorageService

PUBLIC_PREFIX = "https://test-project.supabase.co/storage/v1/object/public/todo-attachments/"


# =============================================================================
# In-memory doubles
# =============================================================================

class FakeRepository:
    """
    In-memory replacement for SupabaseClient's repository methods.

    Set `fail` to a set of method names to make those calls raise
    PersistenceError.
    """

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.todos: dict[str, dict] = {}
        self.fail: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail:
            raise PersistenceError(operation)

    # Users

    def fetch_user_by_email(self, email):
        self._check("fetch_user_by_email")
        for user in self.users.values():
            if user["email"] == email:
                return dict(user)
        return None

    def insert_user(self, data):
        self._check("insert_user")
        if any(u["email"] == data["email"] for u in self.users.values()):
            raise UserAlreadyExistsError()
        row = {"image": None, **data}
        self.users[row["id"]] = row
        return dict(row)

    # Todos

    def fetch_todos(self, user_id):
        self._check("fetch_todos")
        return [dict(t) for t in self.todos.values() if t["user_id"] == str(user_id)]

    def fetch_todo(self, todo_id):
        self._check("fetch_todo")
        row = self.todos.get(str(todo_id))
        return dict(row) if row else None

    def insert_todo(self, data):
        self._check("insert_todo")
        row = {
            "completed": False,
            "status": "InProgress",
            "image_url": None,
            "created_at": datetime.now(timezone.utc).isoformat(),
            **data,
        }
        self.todos[row["id"]] = row
        return dict(row)

    def update_todo(self, todo_id, user_id, data):
        self._check("update_todo")
        row = self.todos.get(str(todo_id))
        if not row or row["user_id"] != str(user_id):
            raise PersistenceError("update_todo")
        row.update(data)
        return dict(row)

    def delete_todo(self, todo_id, user_id):
        self._check("delete_todo")
        row = self.todos.get(str(todo_id))
        if row and row["user_id"] == str(user_id):
            del self.todos[str(todo_id)]


class FakeStorage:
    """
    In-memory replacement for StorageService.

    Key helpers are the real ones; upload/delete/signed_url work on a dict.
    Set `fail` to a set of operation names ("upload", "delete", "sign").
    """

    attachment_key = staticmethod(StorageService.attachment_key)
    key_from_reference = staticmethod(StorageService.key_from_reference)

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.fail: set[str] = set()

    def upload(self, data, content_type, key):
        if "upload" in self.fail:
            raise StorageError("upload", key)
        self.objects[key] = data
        return PUBLIC_PREFIX + key

    def delete(self, key):
        if "delete" in self.fail:
            raise StorageError("delete", key)
        self.objects.pop(key, None)

    def signed_url(self, key, ttl_seconds=None):
        if "sign" in self.fail:
            raise StorageError("sign", key)
        return f"https://signed.example/{key}?ttl={ttl_seconds}"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def repo():
    """Patch the repository used by every service module."""
    fake = FakeRepository()
    with patch("core.services.todo_service.SupabaseClient", fake), \
            patch("core.services.auth_service.SupabaseClient", fake), \
            patch("core.services.registration_service.SupabaseClient", fake):
        yield fake


@pytest.fixture
def storage():
    """Patch the attachment store used by the todo service."""
    fake = FakeStorage()
    with patch("core.services.todo_service.StorageService", fake):
        yield fake


@pytest.fixture
def ann():
    return Identity(id="user-ann", name="Ann", email="ann@x.com")


@pytest.fixture
def bob():
    return Identity(id="user-bob", name="Bob", email="bob@x.com")


@pytest.fixture
def png_image():
    return ImageUpload(
        filename="photo.png",
        content_type="image/png",
        data=b"\x89PNG\r\n\x1a\nfake-image-bytes",
    )
