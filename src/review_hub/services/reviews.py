"""Review submission and catalog reads."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from review_hub.domain.errors import (
    AuthorNotFoundError,
    MalformedIdError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from review_hub.domain.models import (
    Attachment,
    CatalogEntry,
    MediaKind,
    Review,
    ReviewSubmission,
)
from review_hub.services.credentials import UserRepository
from review_hub.services.media import MediaUploader

_logger = logging.getLogger(__name__)


class ReviewRepository(Protocol):
    """Persistence interface for reviews."""

    def create_review(  # noqa: PLR0913
        self,
        content: str,
        author_id: UUID,
        author_name: str,
        image_urls: list[str],
        video_urls: list[str],
    ) -> Review:
        """Insert a review and return the stored record."""

    def list_reviews(self) -> list[CatalogEntry]:
        """Return all reviews in a stable order with their authors joined."""


@dataclass
class ReviewService:
    """Validates submissions, fans out uploads and persists the review."""

    users: UserRepository
    reviews: ReviewRepository
    uploader: MediaUploader

    async def submit(self, submission: ReviewSubmission) -> Review:
        """Create a review once every attachment has been uploaded.

        Either all attachments upload and the review is stored, or the
        submission fails and nothing is written.
        """
        author_id = _parse_author_id(submission.author_id)
        if not submission.content or not submission.content.strip():
            raise ValidationError("Review content is required.")

        author = await asyncio.to_thread(self.users.get_by_id, author_id)
        if author is None:
            raise AuthorNotFoundError()
        author_name = author.name

        images = _of_kind(submission.attachments, MediaKind.IMAGE)
        videos = _of_kind(submission.attachments, MediaKind.VIDEO)
        image_urls, video_urls = await self._upload_all(images, videos)

        try:
            review = await asyncio.to_thread(
                self.reviews.create_review,
                submission.content,
                author_id,
                author_name,
                image_urls,
                video_urls,
            )
        except Exception as exc:
            _logger.exception("Failed to persist review for author %s", author_id)
            raise PersistenceError(f"Error saving review: {exc}") from exc
        _logger.info(
            "Created review %s with %s images and %s videos",
            review.id,
            len(image_urls),
            len(video_urls),
        )
        return review

    async def _upload_all(
        self, images: list[Attachment], videos: list[Attachment]
    ) -> tuple[list[str], list[str]]:
        """Upload every buffer concurrently and join on all outcomes."""
        tasks = [
            asyncio.ensure_future(
                self.uploader.upload(item.data, item.kind, item.filename)
            )
            for item in [*images, *videos]
        ]
        # A failure must not cancel sibling uploads already in flight.
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        failures = [
            outcome for outcome in outcomes if isinstance(outcome, BaseException)
        ]
        if failures:
            _logger.warning(
                "%s of %s uploads failed; review not saved", len(failures), len(tasks)
            )
            first = failures[0]
            if isinstance(first, UploadError):
                raise first
            raise UploadError(f"Error uploading review: {first}") from first
        urls = [str(outcome) for outcome in outcomes]
        return urls[: len(images)], urls[len(images) :]


@dataclass
class ReviewCatalog:
    """Read path for persisted reviews."""

    repository: ReviewRepository

    async def list_all(self) -> list[CatalogEntry]:
        """Return every review with the author's current name and email."""
        return await asyncio.to_thread(self.repository.list_reviews)


def _parse_author_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedIdError() from exc


def _of_kind(attachments: list[Attachment], kind: MediaKind) -> list[Attachment]:
    return [item for item in attachments if item.kind == kind]
