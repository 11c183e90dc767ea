# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the repository methods for:
# - Users (lookup by email, insert)
# - Todos (list by owner, fetch, insert, update, delete)
#
# Every todo mutation is filtered by both id and user_id, so a write can
# never touch another user's row even if a caller skipped the ownership check.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.fetch_todos(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from app.exceptions import PersistenceError, UserAlreadyExistsError

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
TODOS_TABLE = "todos"

# Postgres error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        todo = SupabaseClient.fetch_todo("550e8400-...")
        if todo and todo["user_id"] == identity.id:
            ...
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            PersistenceError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                logger.error(
                    f"Failed to create Supabase client: {e}. "
                    "Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
                raise PersistenceError("connect") from e
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user_by_email(cls, email: str) -> dict[str, Any] | None:
        """
        Fetch the user with the given email.

        Emails are unique, so at most one row matches.

        Returns:
            User dict (including the password hash), or None if not found

        Raises:
            PersistenceError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(USERS_TABLE)
                .select("id, name, email, password, image")
                .eq("email", email)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch user by email: {e}")
            raise PersistenceError("fetch_user") from e

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def insert_user(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new user row.

        Args:
            data: Row with id, name, email, password (hash), optional image

        Returns:
            Inserted user dict

        Raises:
            UserAlreadyExistsError: If the email is already taken
            PersistenceError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table(USERS_TABLE).insert(data).execute()
        except Exception as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                logger.info("User insert rejected by unique email constraint")
                raise UserAlreadyExistsError() from e
            logger.error(f"Failed to insert user: {e}")
            raise PersistenceError("insert_user") from e

        if not response.data:
            logger.error("User insert returned no data")
            raise PersistenceError("insert_user")

        logger.info(f"Created user: {data.get('id')}")
        return response.data[0]

    # -------------------------------------------------------------------------
    # Todos
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_todos(cls, user_id: str | UUID) -> list[dict[str, Any]]:
        """
        Fetch all todos owned by a user.

        No ordering is imposed; callers must not rely on row order.

        Raises:
            PersistenceError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table(TODOS_TABLE)
                .select("*")
                .eq("user_id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch todos for user {user_id_str}: {e}")
            raise PersistenceError("fetch_todos") from e

        todos = response.data or []
        logger.debug(f"Fetched {len(todos)} todos for user {user_id_str}")
        return todos

    @classmethod
    def fetch_todo(cls, todo_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a specific todo by ID, regardless of owner.

        Returns:
            Todo dict, or None if not found

        Raises:
            PersistenceError: If query fails
        """
        client = cls.get_client()
        todo_id_str = cls._normalize_uuid(todo_id)

        try:
            response = (
                client.table(TODOS_TABLE)
                .select("*")
                .eq("id", todo_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch todo {todo_id_str}: {e}")
            raise PersistenceError("fetch_todo") from e

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def insert_todo(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new todo row.

        Returns:
            Inserted todo dict (with database defaults applied)

        Raises:
            PersistenceError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table(TODOS_TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to insert todo: {e}")
            raise PersistenceError("insert_todo") from e

        if not response.data:
            logger.error("Todo insert returned no data")
            raise PersistenceError("insert_todo")

        return response.data[0]

    @classmethod
    def update_todo(
        cls,
        todo_id: str | UUID,
        user_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Update fields of a todo owned by `user_id`.

        Returns:
            Updated todo dict

        Raises:
            PersistenceError: If update fails or matched no row
        """
        client = cls.get_client()
        todo_id_str = cls._normalize_uuid(todo_id)

        try:
            response = (
                client.table(TODOS_TABLE)
                .update(data)
                .eq("id", todo_id_str)
                .eq("user_id", cls._normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update todo {todo_id_str}: {e}")
            raise PersistenceError("update_todo") from e

        if not response.data:
            logger.error(f"Todo update matched no row: {todo_id_str}")
            raise PersistenceError("update_todo")

        return response.data[0]

    @classmethod
    def delete_todo(cls, todo_id: str | UUID, user_id: str | UUID) -> None:
        """
        Delete a todo owned by `user_id`.

        Raises:
            PersistenceError: If delete fails
        """
        client = cls.get_client()
        todo_id_str = cls._normalize_uuid(todo_id)

        try:
            (
                client.table(TODOS_TABLE)
                .delete()
                .eq("id", todo_id_str)
                .eq("user_id", cls._normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete todo {todo_id_str}: {e}")
            raise PersistenceError("delete_todo") from e

        logger.info(f"Deleted todo: {todo_id_str}")
