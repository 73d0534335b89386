"""Cloudinary upload API client."""

import hashlib
import time
from dataclasses import dataclass

import httpx

from review_hub.services.media import MediaStorageClient


@dataclass
class CloudinaryClient(MediaStorageClient):
    """Signed Cloudinary uploads over httpx."""

    cloud_name: str
    api_key: str
    api_secret: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        base_url: str,
        timeout: float = 60.0,
    ) -> "CloudinaryClient":
        """Create a Cloudinary client with a managed httpx session."""
        return cls(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def upload(self, data: bytes, resource_type: str) -> str:
        """Upload bytes as the given resource type and return the secure URL."""
        url = f"{self.base_url}/{self.cloud_name}/{resource_type}/upload"
        timestamp = str(int(time.time()))
        response = await self.http_client.post(
            url,
            data={
                "api_key": self.api_key,
                "timestamp": timestamp,
                "signature": sign_params({"timestamp": timestamp}, self.api_secret),
            },
            files={"file": ("upload", data, "application/octet-stream")},
            timeout=self.timeout,
        )
        payload = _json_or_empty(response)
        if response.is_error:
            error = payload.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            raise RuntimeError(
                f"Cloudinary upload failed ({response.status_code}): "
                f"{message or response.text}"
            )
        secure_url = payload.get("secure_url")
        if not secure_url:
            raise RuntimeError("Cloudinary response missing secure_url")
        return str(secure_url)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Return the Cloudinary SHA-1 signature for upload parameters."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


def _json_or_empty(response: httpx.Response) -> dict[str, object]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
