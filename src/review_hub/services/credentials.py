"""Account registration, sign-in and session token checks."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from review_hub.domain.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    PersistenceError,
    ValidationError,
)
from review_hub.domain.models import AuthResult, PublicUser, SessionToken, UserAccount
from review_hub.security import PasswordHasher, TokenSigner

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def get_by_email(self, email: str) -> UserAccount | None:
        """Return the account registered with an email, if present."""

    def get_by_id(self, user_id: UUID) -> UserAccount | None:
        """Return the account for an id, if present."""

    def create_user(
        self, name: str, email: str, password_hash: str, address: str
    ) -> UserAccount:
        """Create and return a new account.

        Raises DuplicateEmailError when the store's unique constraint rejects
        the email.
        """


@dataclass
class CredentialService:
    """Application service for the credential and session lifecycle."""

    repository: UserRepository
    hasher: PasswordHasher
    signer: TokenSigner

    async def register(
        self, name: str, email: str, password: str, address: str
    ) -> PublicUser:
        """Register a new account and return its public fields."""
        if not all(_present(value) for value in (name, email, password, address)):
            raise ValidationError("All fields are required.")

        existing = await asyncio.to_thread(self.repository.get_by_email, email)
        if existing:
            raise DuplicateEmailError()

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        try:
            created = await asyncio.to_thread(
                self.repository.create_user, name, email, password_hash, address
            )
        except DuplicateEmailError:
            raise
        except Exception as exc:
            _logger.exception("Failed to create user account")
            raise PersistenceError(f"Signup failed: {exc}") from exc
        _logger.info("Registered user %s", created.id)
        return created.to_public()

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Verify credentials and mint a session token."""
        if not _present(email) or not _present(password):
            raise ValidationError("Email and password are required.")

        user = await asyncio.to_thread(self.repository.get_by_email, email)
        if user is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password)
            raise InvalidCredentialsError()
        valid = await asyncio.to_thread(
            self.hasher.verify, password, user.password_hash
        )
        if not valid:
            raise InvalidCredentialsError()

        token = self.signer.issue(user.id, user.email)
        _logger.info("Issued session token for user %s", user.id)
        return AuthResult(token=token, user=user.to_public())

    def verify_token(self, token: str) -> SessionToken:
        """Return the decoded session for a bearer token."""
        return self.signer.verify(token)


def _present(value: str | None) -> bool:
    return value is not None and bool(value.strip())
