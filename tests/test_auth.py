# =============================================================================
# tests/test_auth.py - Registration, Credentials & Session Token Tests
# =============================================================================
# This module contains tests for:
# - Password hashing helpers
# - RegistrationService (uniqueness, hashing, no secrets returned)
# - CredentialVerifier (match, mismatch, unknown user, no local password)
# - Session tokens (round trip, expiry, tampering)
# =============================================================================

import time

import pytest

from app.auth.tokens import create_session_token, decode_session_token
from app.config import settings
from app.exceptions import PasswordTooLongError, UserAlreadyExistsError
from core.models.user import Identity
from core.services.auth_service import CredentialVerifier, hash_password, verify_password
from core.services.registration_service import RegistrationService


# =============================================================================
# Password Hashing
# =============================================================================

class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret1")

        assert hashed != "secret1"
        assert hashed.startswith("$2")

    def test_hashes_are_salted(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_verify(self):
        hashed = hash_password("secret1")

        assert verify_password("secret1", hashed) is True
        assert verify_password("secret2", hashed) is False

    def test_verify_malformed_hash(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False

    def test_rejects_over_long_password(self):
        with pytest.raises(PasswordTooLongError):
            hash_password("x" * 73)


# =============================================================================
# RegistrationService
# =============================================================================

class TestRegistration:
    """Tests for RegistrationService.register."""

    def test_creates_user_with_hashed_password(self, repo):
        identity = RegistrationService.register("Ann", "ann@x.com", "secret1")

        stored = repo.users[identity.id]
        assert stored["email"] == "ann@x.com"
        assert stored["password"] != "secret1"
        assert verify_password("secret1", stored["password"])

    def test_returns_identity_without_secrets(self, repo):
        identity = RegistrationService.register("Ann", "ann@x.com", "secret1")

        dumped = identity.model_dump()
        assert set(dumped) == {"id", "name", "email", "image"}
        assert "secret1" not in dumped.values()

    def test_duplicate_email_rejected(self, repo):
        """A second registration with the same email creates nothing."""
        RegistrationService.register("Ann", "ann@x.com", "secret1")

        with pytest.raises(UserAlreadyExistsError):
            RegistrationService.register("Another Ann", "ann@x.com", "other-pass")

        assert len(repo.users) == 1

    def test_duplicate_email_case_insensitive(self, repo):
        RegistrationService.register("Ann", "ann@x.com", "secret1")

        with pytest.raises(UserAlreadyExistsError):
            RegistrationService.register("Ann", "  ANN@x.com ", "secret1")

        assert len(repo.users) == 1


# =============================================================================
# CredentialVerifier
# =============================================================================

class TestCredentialVerifier:
    """Tests for CredentialVerifier.verify."""

    @pytest.fixture
    def registered(self, repo):
        return RegistrationService.register("Ann", "ann@x.com", "secret1")

    def test_valid_credentials(self, registered):
        identity = CredentialVerifier.verify("ann@x.com", "secret1")

        assert identity == registered
        assert identity.name == "Ann"

    def test_wrong_password(self, registered):
        assert CredentialVerifier.verify("ann@x.com", "wrong") is None

    def test_unknown_email(self, registered):
        assert CredentialVerifier.verify("nobody@x.com", "secret1") is None

    def test_email_is_normalized(self, registered):
        assert CredentialVerifier.verify(" Ann@X.com", "secret1") is not None

    def test_user_without_local_password(self, repo):
        """Accounts from an external identity provider can't log in locally."""
        repo.users["oauth-user"] = {
            "id": "oauth-user",
            "name": "OAuth",
            "email": "oauth@x.com",
            "password": None,
            "image": None,
        }

        assert CredentialVerifier.verify("oauth@x.com", "anything") is None

    def test_missing_fields(self, repo):
        assert CredentialVerifier.verify("", "secret1") is None
        assert CredentialVerifier.verify("ann@x.com", "") is None


# =============================================================================
# Session Tokens
# =============================================================================

class TestSessionTokens:
    """Tests for create_session_token / decode_session_token."""

    @pytest.fixture
    def identity(self):
        return Identity(id="user-ann", name="Ann", email="ann@x.com", image=None)

    def test_round_trip(self, identity):
        token = create_session_token(identity)

        assert decode_session_token(token) == identity

    def test_expired_token(self, identity):
        issued = int(time.time()) - settings.SESSION_MAX_AGE_SECONDS - 10
        token = create_session_token(identity, now=issued)

        assert decode_session_token(token) is None

    def test_tampered_token(self, identity):
        token = create_session_token(identity)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        assert decode_session_token(tampered) is None

    def test_garbage_token(self):
        assert decode_session_token("not-a-token") is None
