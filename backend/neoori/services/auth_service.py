"""Authentication helpers: bcrypt password hashing and JWT issuance."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from neoori.config import Settings
from neoori.exceptions import InvalidToken

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


class TokenService:
    """Signs and verifies access and refresh tokens.

    Access and refresh tokens are signed with different secrets, so one can
    never be presented in place of the other.
    """

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.refresh_secret = settings.jwt_refresh_secret
        self.algorithm = settings.jwt_algorithm
        self.access_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=settings.refresh_token_expire_days)

    def _encode(self, payload: TokenPayload, secret: str, expires_at: datetime) -> str:
        claims = {
            "userId": payload.user_id,
            "email": payload.email,
            "exp": expires_at,
            "iat": datetime.now(timezone.utc),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str) -> TokenPayload:
        try:
            claims = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken() from e
        user_id = claims.get("userId")
        email = claims.get("email")
        if not user_id or not email:
            raise InvalidToken()
        return TokenPayload(user_id=user_id, email=email)

    def issue_access_token(self, payload: TokenPayload) -> str:
        return self._encode(payload, self.secret, datetime.now(timezone.utc) + self.access_ttl)

    def issue_refresh_token(self, payload: TokenPayload) -> tuple[str, datetime]:
        """Return the signed refresh token and the expiry to persist with it."""
        expires_at = datetime.now(timezone.utc) + self.refresh_ttl
        return self._encode(payload, self.refresh_secret, expires_at), expires_at

    def issue_pair(self, payload: TokenPayload) -> TokenPair:
        refresh_token, expires_at = self.issue_refresh_token(payload)
        return TokenPair(
            access_token=self.issue_access_token(payload),
            refresh_token=refresh_token,
            refresh_expires_at=expires_at,
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        return self._decode(token, self.secret)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self._decode(token, self.refresh_secret)
