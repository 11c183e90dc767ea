# =============================================================================
# core/services/registration_service.py - User Registration
# =============================================================================
# Creates user records after checking that the email is free.
# =============================================================================

import logging
from uuid import uuid4

from app.exceptions import UserAlreadyExistsError
from core.models.user import Identity, normalize_email
from core.services.auth_service import hash_password
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Service for registering new users.
    """

    @staticmethod
    def register(name: str, email: str, password: str) -> Identity:
        """
        Register a new user.

        Args:
            name: Display name
            email: Login email, unique across users
            password: Plaintext password (hashed before storage)

        Returns:
            Identity of the new user (never includes the password or hash)

        Raises:
            UserAlreadyExistsError: If the email is already registered
            PasswordTooLongError: If the password cannot be hashed
            PersistenceError: If the database call fails
        """
        email = normalize_email(email)

        if SupabaseClient.fetch_user_by_email(email):
            logger.info("Registration rejected: email already registered")
            raise UserAlreadyExistsError()

        user_id = str(uuid4())
        row = SupabaseClient.insert_user({
            "id": user_id,
            "name": name,
            "email": email,
            "password": hash_password(password),
        })

        logger.info(f"Registered user: {user_id}")
        return Identity.from_user_row(row)
