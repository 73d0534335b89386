"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from review_hub.adapters.cloudinary_client import CloudinaryClient
from review_hub.adapters.supabase_review_repository import SupabaseReviewRepository
from review_hub.adapters.supabase_user_repository import SupabaseUserRepository
from review_hub.config import Settings
from review_hub.security import PasswordHasher, TokenSigner
from review_hub.services.credentials import CredentialService
from review_hub.services.media import MediaUploader
from review_hub.services.reviews import ReviewCatalog, ReviewService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    credential_service: CredentialService
    review_service: ReviewService
    review_catalog: ReviewCatalog
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    review_repository = SupabaseReviewRepository(supabase_client)
    credential_service = CredentialService(
        repository=user_repository,
        hasher=PasswordHasher(rounds=resolved_settings.bcrypt_rounds),
        signer=TokenSigner(
            secret=resolved_settings.jwt_secret,
            algorithm=resolved_settings.jwt_algorithm,
            ttl=timedelta(minutes=resolved_settings.access_token_ttl_minutes),
        ),
    )
    cloudinary_client = CloudinaryClient.create(
        cloud_name=resolved_settings.cloudinary_cloud_name,
        api_key=resolved_settings.cloudinary_api_key,
        api_secret=resolved_settings.cloudinary_api_secret,
        base_url=resolved_settings.cloudinary_base_url,
        timeout=resolved_settings.upload_timeout_seconds,
    )
    review_service = ReviewService(
        users=user_repository,
        reviews=review_repository,
        uploader=MediaUploader(cloudinary_client),
    )
    review_catalog = ReviewCatalog(review_repository)

    async def close_resources() -> None:
        await cloudinary_client.close()

    return AppContainer(
        settings=resolved_settings,
        credential_service=credential_service,
        review_service=review_service,
        review_catalog=review_catalog,
        close_resources=close_resources,
    )
