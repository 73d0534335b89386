"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str
    cloudinary_base_url: str = "https://api.cloudinary.com/v1_1"
    upload_timeout_seconds: float = 60.0
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 60
    bcrypt_rounds: int = 10
    max_images_per_review: int = 10
    max_videos_per_review: int = 10
    require_upload_auth: bool = False
    cors_allowed_origins: str = "*"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip() for chunk in cleaned.split(",")]
    return [origin for origin in origins if origin] or ["*"]
