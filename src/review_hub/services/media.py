"""Media uploads to the external object-storage provider."""

import logging
from dataclasses import dataclass
from typing import Protocol

from review_hub.domain.errors import UploadError
from review_hub.domain.models import MediaKind

_logger = logging.getLogger(__name__)


class MediaStorageClient(Protocol):
    """Interface for the external object-storage provider."""

    async def upload(self, data: bytes, resource_type: str) -> str:
        """Store bytes and return their durable public URL."""


@dataclass
class MediaUploader:
    """Uploads single media buffers, one provider call per buffer."""

    client: MediaStorageClient

    async def upload(
        self, data: bytes, kind: MediaKind, filename: str | None = None
    ) -> str:
        """Upload a buffer and return its URL, or raise UploadError."""
        try:
            url = await self.client.upload(data, kind.value)
        except Exception as exc:
            label = filename or "<unnamed>"
            _logger.warning("Provider rejected %s %s: %s", kind.value, label, exc)
            raise UploadError(f"Failed to upload {kind.value} {label}: {exc}") from exc
        if not url:
            raise UploadError(f"Provider returned no URL for {kind.value}")
        return url
