# =============================================================================
# core/services/auth_service.py - Password Hashing & Credential Verification
# =============================================================================
# Handles checking an email/password pair against the stored user record.
# Plaintext passwords and hashes are never logged or returned.
# =============================================================================

import logging

import bcrypt

from app.config import settings
from app.exceptions import PasswordTooLongError
from core.models.user import Identity, normalize_email
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh bcrypt salt.

    Raises:
        PasswordTooLongError: If the UTF-8 password exceeds 72 bytes
    """
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise PasswordTooLongError(BCRYPT_MAX_BYTES)
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Compare a password against a bcrypt hash in constant time."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


class CredentialVerifier:
    """
    Verifies login credentials against the users table.
    """

    @staticmethod
    def verify(email: str, password: str) -> Identity | None:
        """
        Check an email/password pair.

        Args:
            email: Login email (compared case-insensitively)
            password: Plaintext password

        Returns:
            Identity on match, None otherwise. Accounts without a local
            password hash (e.g. created through an external identity
            provider) never match.

        Raises:
            PersistenceError: If the user lookup fails
        """
        if not email or not password:
            return None

        user = SupabaseClient.fetch_user_by_email(normalize_email(email))
        if not user:
            logger.debug("Login attempt for unknown email")
            return None

        password_hash = user.get("password")
        if not password_hash:
            logger.debug(f"User {user['id']} has no local password")
            return None

        if not verify_password(password, password_hash):
            logger.info(f"Password mismatch for user {user['id']}")
            return None

        return Identity.from_user_row(user)
