"""Supabase-backed review repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from review_hub.domain.models import CatalogEntry, Review, ReviewAuthor
from review_hub.services.reviews import ReviewRepository

_REVIEW_COLUMNS = (
    "id, content, author_id, author_name, image_urls, video_urls, "
    "created_at, updated_at"
)


@dataclass
class SupabaseReviewRepository(ReviewRepository):
    """Supabase implementation for review persistence."""

    client: Client

    def create_review(  # noqa: PLR0913
        self,
        content: str,
        author_id: UUID,
        author_name: str,
        image_urls: list[str],
        video_urls: list[str],
    ) -> Review:
        """Insert a review row and return it."""
        response = (
            self.client.table("reviews")
            .insert(
                {
                    "content": content,
                    "author_id": str(author_id),
                    "author_name": author_name,
                    "image_urls": image_urls,
                    "video_urls": video_urls,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create review in Supabase")
        return _row_to_review(response.data[0])

    def list_reviews(self) -> list[CatalogEntry]:
        """Return reviews oldest first with author name and email embedded."""
        response = (
            self.client.table("reviews")
            .select(f"{_REVIEW_COLUMNS}, author:users(id, name, email)")
            .order("created_at")
            .order("id")
            .execute()
        )
        return [
            CatalogEntry(review=_row_to_review(row), author=_row_to_author(row))
            for row in response.data or []
        ]


def _row_to_review(row: dict[str, object]) -> Review:
    return Review(
        id=UUID(str(row["id"])),
        content=str(row["content"]),
        author_id=UUID(str(row["author_id"])),
        author_name=str(row["author_name"]),
        image_urls=list(row.get("image_urls") or []),
        video_urls=list(row.get("video_urls") or []),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )


def _row_to_author(row: dict[str, object]) -> ReviewAuthor | None:
    author = row.get("author")
    if not isinstance(author, dict):
        return None
    return ReviewAuthor(
        id=UUID(str(author["id"])),
        name=str(author["name"]),
        email=str(author["email"]),
    )
