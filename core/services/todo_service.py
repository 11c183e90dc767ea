# =============================================================================
# core/services/todo_service.py - Todo Business Logic
# =============================================================================
# Orchestrates the todo operations on top of the repository and the
# attachment store:
# - list_todos: degrade to an empty list (plus error signal) on failure
# - create_todo: persist first, then attach the image best-effort
# - update_status: owner-only, keeps status and completed in step
# - delete_todo: owner-only, removes the attachment before the row
#
# The acting identity is always an explicit argument, resolved once at the
# request boundary.
# =============================================================================

import logging
from datetime import datetime, timezone
from uuid import uuid4

from app.config import settings
from app.exceptions import (
    EmptyContentError,
    ImageTooLargeError,
    InvalidImageError,
    InvalidStatusError,
    NoAttachmentError,
    PersistenceError,
    StorageError,
    TodoNotFoundError,
    TodoOwnershipError,
    UnauthenticatedError,
)
from core.models.todo import ImageUpload, Todo, TodoList, TodoStatus
from core.models.user import Identity
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

LIST_FAILED_MESSAGE = "Failed to load todos"


def _require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise UnauthenticatedError()
    return identity


def _coerce_status(status: TodoStatus | str) -> TodoStatus:
    if isinstance(status, TodoStatus):
        return status
    try:
        return TodoStatus(status)
    except ValueError:
        raise InvalidStatusError(str(status), TodoStatus.values())


def _validate_image(image: ImageUpload) -> None:
    allowed = settings.allowed_image_types_list
    if (image.content_type or "").lower() not in allowed:
        raise InvalidImageError(image.content_type, allowed)
    if image.size > settings.max_image_size_bytes:
        raise ImageTooLargeError(image.size / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)


class TodoService:
    """
    Service for todo operations.

    Every operation is scoped to the acting identity: a todo owned by
    someone else is never read or written.
    """

    @staticmethod
    def get_owned_todo(identity: Identity, todo_id: str) -> Todo:
        """
        Fetch a todo and verify the identity owns it.

        Raises:
            TodoNotFoundError: If no todo has this id
            TodoOwnershipError: If the todo belongs to another user
        """
        row = SupabaseClient.fetch_todo(todo_id)

        if not row:
            raise TodoNotFoundError(todo_id)

        if str(row.get("user_id")) != str(identity.id):
            logger.warning(f"User {identity.id} denied access to todo {todo_id}")
            raise TodoOwnershipError(todo_id)

        return Todo.from_db_row(row)

    @staticmethod
    def list_todos(identity: Identity | None) -> TodoList:
        """
        List all todos owned by the identity.

        Never raises for a failed fetch: the result is an empty list with
        `error` set, and the failure is logged.

        Returns:
            TodoList (empty when there is no identity)
        """
        if identity is None:
            return TodoList()

        try:
            rows = SupabaseClient.fetch_todos(identity.id)
        except PersistenceError:
            logger.exception(f"Failed to fetch todos for user {identity.id}")
            return TodoList(error=LIST_FAILED_MESSAGE)

        return TodoList(todos=[Todo.from_db_row(row) for row in rows])

    @staticmethod
    def create_todo(
        identity: Identity | None,
        content: str | None,
        image: ImageUpload | None = None,
    ) -> Todo:
        """
        Create a todo, optionally with an image attachment.

        The record is persisted first with no attachment. If an image was
        supplied it is then uploaded under "{owner_id}/{filename}" and the
        record's image_url is set. A failed upload leaves the todo in place
        without an attachment; the failure is only logged.

        Args:
            identity: Acting user
            content: Todo text (must contain non-whitespace characters)
            image: Optional image; an empty upload counts as no image

        Returns:
            The todo as persisted

        Raises:
            UnauthenticatedError: If there is no identity
            EmptyContentError: If content is empty or whitespace only
            InvalidImageError / ImageTooLargeError: If the image is rejected
            PersistenceError: If the record cannot be inserted
        """
        identity = _require_identity(identity)

        content = content or ""
        if not content.strip():
            raise EmptyContentError()

        if image is not None and image.is_empty:
            image = None
        if image is not None:
            _validate_image(image)

        todo_id = str(uuid4())
        row = SupabaseClient.insert_todo({
            "id": todo_id,
            "content": content,
            "completed": False,
            "status": TodoStatus.IN_PROGRESS.value,
            "image_url": None,
            "user_id": identity.id,
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        todo = Todo.from_db_row(row)
        logger.info(f"Created todo {todo_id} for user {identity.id}")

        if image is None:
            return todo

        key = StorageService.attachment_key(identity.id, image.filename)
        try:
            image_url = StorageService.upload(image.data, image.content_type, key)
        except StorageError:
            logger.exception(f"Image upload failed for todo {todo_id}; keeping todo without attachment")
            return todo

        try:
            row = SupabaseClient.update_todo(todo_id, identity.id, {"image_url": image_url})
        except PersistenceError:
            logger.exception(f"Failed to attach image to todo {todo_id}")
            try:
                StorageService.delete(key)
            except StorageError:
                logger.error(f"Orphaned attachment left in storage: {key}")
            return todo

        return Todo.from_db_row(row)

    @staticmethod
    def update_status(
        identity: Identity | None,
        todo_id: str,
        status: TodoStatus | str,
    ) -> Todo:
        """
        Set a todo's status.

        `completed` is written together with `status` so that
        completed == (status == Done) always holds.

        Raises:
            UnauthenticatedError: If there is no identity
            InvalidStatusError: If status is not a known value
            TodoNotFoundError: If the todo doesn't exist
            TodoOwnershipError: If the identity doesn't own the todo
        """
        identity = _require_identity(identity)
        new_status = _coerce_status(status)

        TodoService.get_owned_todo(identity, todo_id)

        row = SupabaseClient.update_todo(todo_id, identity.id, {
            "status": new_status.value,
            "completed": new_status.completed,
        })

        logger.info(f"Todo {todo_id} status -> {new_status.value}")
        return Todo.from_db_row(row)

    @staticmethod
    def delete_todo(identity: Identity | None, todo_id: str) -> None:
        """
        Delete a todo and its attachment.

        The attachment is removed first. If that fails the record is kept
        and StorageError propagates, so no record is left pointing at a
        deleted object.

        Raises:
            UnauthenticatedError: If there is no identity
            TodoNotFoundError: If the todo doesn't exist
            TodoOwnershipError: If the identity doesn't own the todo
            StorageError: If the attachment cannot be removed
        """
        identity = _require_identity(identity)
        todo = TodoService.get_owned_todo(identity, todo_id)

        if todo.image_url:
            key = StorageService.key_from_reference(todo.image_url)
            StorageService.delete(key)

        try:
            SupabaseClient.delete_todo(todo_id, identity.id)
        except PersistenceError:
            if todo.image_url:
                logger.error(f"Todo {todo_id} still references deleted attachment: {todo.image_url}")
            raise
        logger.info(f"Deleted todo {todo_id} for user {identity.id}")

    @staticmethod
    def get_attachment_url(
        identity: Identity | None,
        todo_id: str,
        ttl_seconds: int | None = None,
    ) -> str:
        """
        Create a short-lived URL for a todo's attachment.

        Raises:
            NoAttachmentError: If the todo has no attachment
            StorageError: If signing fails
        """
        identity = _require_identity(identity)
        todo = TodoService.get_owned_todo(identity, todo_id)

        if not todo.image_url:
            raise NoAttachmentError(todo_id)

        key = StorageService.key_from_reference(todo.image_url)
        return StorageService.signed_url(key, ttl_seconds)
