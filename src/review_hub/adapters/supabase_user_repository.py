"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from review_hub.domain.errors import DuplicateEmailError
from review_hub.domain.models import UserAccount
from review_hub.services.credentials import UserRepository

_USER_COLUMNS = "id, name, email, password_hash, address"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_email(self, email: str) -> UserAccount | None:
        """Return the account registered with an email, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_user(response.data[0])
        return None

    def get_by_id(self, user_id: UUID) -> UserAccount | None:
        """Return the account for an id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_user(response.data[0])
        return None

    def create_user(
        self, name: str, email: str, password_hash: str, address: str
    ) -> UserAccount:
        """Create a new user row and return it."""
        try:
            response = (
                self.client.table("users")
                .insert(
                    {
                        "name": name,
                        "email": email,
                        "password_hash": password_hash,
                        "address": address,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateEmailError() from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _row_to_user(response.data[0])


def _row_to_user(row: dict[str, object]) -> UserAccount:
    return UserAccount(
        id=UUID(str(row["id"])),
        name=str(row["name"]),
        email=str(row["email"]),
        password_hash=str(row["password_hash"]),
        address=str(row["address"]),
    )
