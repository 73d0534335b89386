"""Error taxonomy shared by services and the HTTP layer."""


class ReviewHubError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Unexpected failure."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ReviewHubError):
    """Missing or malformed required fields."""

    status_code = 400
    default_message = "Missing or invalid fields."


class MalformedIdError(ValidationError):
    """Identifier that cannot be parsed."""

    default_message = "Invalid userId format."


class DuplicateEmailError(ReviewHubError):
    """Email is already registered."""

    status_code = 400
    default_message = "Email already in use."


class InvalidCredentialsError(ReviewHubError):
    """Unknown email or wrong password; the message never says which."""

    status_code = 400
    default_message = "Invalid email or password."


class InvalidTokenError(ReviewHubError):
    """Bearer token missing, malformed, badly signed, or expired."""

    status_code = 401
    default_message = "Invalid or expired token."


class AuthorNotFoundError(ReviewHubError):
    """Review author does not exist."""

    status_code = 404
    default_message = "User not found."


class UploadError(ReviewHubError):
    """The media provider rejected an attachment."""

    default_message = "Error uploading media."


class PersistenceError(ReviewHubError):
    """The store failed to write a record."""

    default_message = "Failed to save record."
