"""Password hashing and bearer token signing."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from review_hub.domain.errors import InvalidTokenError
from review_hub.domain.models import SessionToken


@dataclass
class PasswordHasher:
    """bcrypt password hashing with a fixed work factor."""

    rounds: int
    context: CryptContext = field(init=False, repr=False)
    dummy_hash: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=self.rounds
        )
        self.dummy_hash = self.context.hash("no-such-account")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self.context.verify(password, password_hash)
        except ValueError:
            # Unrecognized or corrupted hash.
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend one verify so unknown accounts cost the same as known ones."""
        self.context.verify(password, self.dummy_hash)


@dataclass
class TokenSigner:
    """Issues and verifies HS256 session tokens."""

    secret: str
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=1)

    def issue(
        self, user_id: UUID, email: str, now: datetime | None = None
    ) -> SessionToken:
        """Mint a token valid for the configured window from ``now``."""
        issued_at = (now or datetime.now(tz=UTC)).replace(microsecond=0)
        expires_at = issued_at + self.ttl
        claims = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        return SessionToken(
            token=token,
            user_id=user_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def verify(self, token: str) -> SessionToken:
        """Decode a token, raising InvalidTokenError when it cannot be trusted."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return SessionToken(
                token=token,
                user_id=UUID(str(claims["sub"])),
                email=str(claims.get("email", "")),
                issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
            )
        except (JWTError, KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc
