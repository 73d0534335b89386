"""Domain models for accounts and reviews."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class MediaKind(StrEnum):
    """Kind of media attachment; values match the provider's resource type."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class UserAccount:
    """Represents a user stored in the database."""

    id: UUID
    name: str
    email: str
    password_hash: str
    address: str

    def to_public(self) -> "PublicUser":
        """Return the fields that may leave the service."""
        return PublicUser(
            id=self.id, name=self.name, email=self.email, address=self.address
        )


@dataclass(frozen=True)
class PublicUser:
    """User fields safe to return to clients."""

    id: UUID
    name: str
    email: str
    address: str


@dataclass(frozen=True)
class SessionToken:
    """Signed bearer token and its decoded claims."""

    token: str
    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful sign-in."""

    token: SessionToken
    user: PublicUser


@dataclass(frozen=True)
class Attachment:
    """One uploaded media buffer with its declared kind."""

    data: bytes = field(repr=False)
    kind: MediaKind
    filename: str | None = None


@dataclass(frozen=True)
class ReviewSubmission:
    """Validated review submission coming from the request boundary."""

    content: str
    author_id: str
    attachments: list[Attachment] = field(default_factory=list)


@dataclass(frozen=True)
class Review:
    """Persisted review with the author's name captured at submission time."""

    id: UUID
    content: str
    author_id: UUID
    author_name: str
    image_urls: list[str]
    video_urls: list[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ReviewAuthor:
    """Author fields joined into catalog entries."""

    id: UUID
    name: str
    email: str


@dataclass(frozen=True)
class CatalogEntry:
    """Review enriched with its author's current public fields."""

    review: Review
    author: ReviewAuthor | None
