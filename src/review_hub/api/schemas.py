"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from review_hub.domain.models import CatalogEntry, PublicUser, Review


class SignupRequest(BaseModel):
    """Signup body; presence is checked by the credential service."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    address: str | None = None


class SigninRequest(BaseModel):
    """Signin body."""

    email: str | None = None
    password: str | None = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class UserOut(_CamelModel):
    id: UUID
    name: str
    email: str
    address: str


class AuthorOut(_CamelModel):
    id: UUID
    name: str
    email: str


class ReviewOut(_CamelModel):
    id: UUID
    content: str
    author_id: UUID
    author_name: str
    image_urls: list[str]
    video_urls: list[str]
    created_at: datetime
    updated_at: datetime


class CatalogReviewOut(ReviewOut):
    author: AuthorOut | None = None


def user_payload(user: PublicUser) -> dict[str, object]:
    """Serialize public user fields."""
    return UserOut.model_validate(user).model_dump(mode="json", by_alias=True)


def review_payload(review: Review) -> dict[str, object]:
    """Serialize a review."""
    return ReviewOut.model_validate(review).model_dump(mode="json", by_alias=True)


def catalog_payload(entry: CatalogEntry) -> dict[str, object]:
    """Serialize a review with its joined author."""
    model = CatalogReviewOut.model_validate(entry.review)
    if entry.author is not None:
        model.author = AuthorOut.model_validate(entry.author)
    return model.model_dump(mode="json", by_alias=True)
