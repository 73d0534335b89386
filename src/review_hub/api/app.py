"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from review_hub.api.schemas import (
    SigninRequest,
    SignupRequest,
    catalog_payload,
    review_payload,
    user_payload,
)
from review_hub.app_logging import configure_logging
from review_hub.config import Settings, parse_cors_origins
from review_hub.containers import AppContainer
from review_hub.domain.errors import InvalidTokenError, ReviewHubError, ValidationError
from review_hub.domain.models import (
    Attachment,
    MediaKind,
    ReviewSubmission,
    SessionToken,
)

_MISSING_IDS = {"", "null", "undefined"}

_bearer = HTTPBearer(auto_error=False)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ReviewHubError)
    async def handle_review_hub_error(
        request: Request, exc: ReviewHubError
    ) -> JSONResponse:
        content: dict[str, object] = {"success": False, "message": exc.message}
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
            content["message"] = exc.default_message
            content["error"] = exc.message
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": ValidationError.default_message,
                "errors": _describe_validation_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unexpected failure on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": ReviewHubError.default_message,
                "error": str(exc),
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/signup", status_code=status.HTTP_201_CREATED)
    async def signup(body: SignupRequest, request: Request) -> dict[str, object]:
        """Register a new account."""
        state_container: AppContainer = request.app.state.container
        user = await state_container.credential_service.register(
            name=body.name,
            email=body.email,
            password=body.password,
            address=body.address,
        )
        return {
            "success": True,
            "message": "User registered successfully.",
            "user": user_payload(user),
        }

    @app.post("/signin")
    async def signin(body: SigninRequest, request: Request) -> dict[str, object]:
        """Verify credentials and return a bearer token."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.credential_service.authenticate(
            email=body.email, password=body.password
        )
        return {
            "success": True,
            "message": "Sign In Successful!",
            "token": result.token.token,
            "expiresAt": result.token.expires_at.isoformat(),
            "user": user_payload(result.user),
        }

    @app.post("/upload", status_code=status.HTTP_201_CREATED)
    async def upload_review(  # noqa: PLR0913
        request: Request,
        content: str | None = Form(default=None),
        user_id: str | None = Form(default=None, alias="userId"),
        images: list[UploadFile | str] | None = File(default=None),
        images_bracketed: list[UploadFile | str] | None = File(
            default=None, alias="images[]"
        ),
        videos: list[UploadFile | str] | None = File(default=None),
        videos_bracketed: list[UploadFile | str] | None = File(
            default=None, alias="videos[]"
        ),
        session: SessionToken | None = Depends(_upload_session),
    ) -> dict[str, object]:
        """Create a review with its media attachments."""
        state_container: AppContainer = request.app.state.container
        submission = await _read_submission(
            state_container.settings,
            content=content,
            user_id=user_id,
            images=[*(images or []), *(images_bracketed or [])],
            videos=[*(videos or []), *(videos_bracketed or [])],
        )
        if session is not None:
            logger.info("Upload authorized for user %s", session.user_id)
        review = await state_container.review_service.submit(submission)
        return {
            "success": True,
            "message": "Review uploaded successfully.",
            "review": review_payload(review),
        }

    @app.get("/display")
    async def display_reviews(request: Request) -> dict[str, object]:
        """Return all reviews with their authors joined."""
        state_container: AppContainer = request.app.state.container
        entries = await state_container.review_catalog.list_all()
        return {
            "success": True,
            "message": "Reviews retrieved successfully.",
            "reviews": [catalog_payload(entry) for entry in entries],
        }

    return app


async def _upload_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> SessionToken | None:
    """Check the bearer token when uploads require authentication."""
    container: AppContainer = request.app.state.container
    if not container.settings.require_upload_auth:
        return None
    if credentials is None:
        raise InvalidTokenError("Bearer token is required.")
    return container.credential_service.verify_token(credentials.credentials)


async def _read_submission(
    settings: Settings,
    *,
    content: str | None,
    user_id: str | None,
    images: list[UploadFile | str],
    videos: list[UploadFile | str],
) -> ReviewSubmission:
    """Validate the multipart form and read attachment bytes."""
    if user_id is None or user_id.strip() in _MISSING_IDS:
        raise ValidationError("Valid userId is required.")
    images = _selected_files(images)
    videos = _selected_files(videos)
    if len(images) > settings.max_images_per_review:
        raise ValidationError(
            f"At most {settings.max_images_per_review} images are allowed."
        )
    if len(videos) > settings.max_videos_per_review:
        raise ValidationError(
            f"At most {settings.max_videos_per_review} videos are allowed."
        )
    attachments = [
        *[await _to_attachment(file, MediaKind.IMAGE) for file in images],
        *[await _to_attachment(file, MediaKind.VIDEO) for file in videos],
    ]
    return ReviewSubmission(
        content=content or "",
        author_id=user_id.strip(),
        attachments=attachments,
    )


def _selected_files(parts: list[UploadFile | str]) -> list[UploadFile]:
    # An empty file input is sent as a part with no filename.
    return [part for part in parts if isinstance(part, UploadFile) and part.filename]


async def _to_attachment(file: UploadFile, kind: MediaKind) -> Attachment:
    data = await file.read()
    await file.close()
    return Attachment(data=data, kind=kind, filename=file.filename)


def _describe_validation_errors(exc: RequestValidationError) -> list[str]:
    """Return short field descriptions for invalid request parts."""
    descriptions = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        descriptions.append(f"{location}: {error.get('msg', 'invalid')}")
    return descriptions
