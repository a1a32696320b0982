"""Password hashing and signed token issuance/verification."""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt
from pydantic import BaseModel, ConfigDict, SecretStr

from bastion.core.config import settings

# bcrypt only uses the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

REFRESH_KIND = "refresh"


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with a fresh salt. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


# Checked against when a username does not exist so both branches cost one bcrypt run.
DUMMY_PASSWORD_HASH = hash_password("bastion-dummy-password")


class TokenError(Exception):
    """Base for token verification failures."""


class MalformedTokenError(TokenError):
    """Token cannot be parsed into a payload, or the payload lacks required claims."""


class InvalidSignatureError(TokenError):
    """Signature does not match (tampered token or different signing secret)."""


class ExpiredTokenError(TokenError):
    """Current time is at or past the token's exp claim."""


class TokenClaims(BaseModel):
    """Verified contents of a token."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    kind: str | None = None
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenService:
    """
    Issues and verifies HMAC-signed JWTs for one signing secret.

    Instances are immutable; rotating the secret means building a new service,
    after which every token signed with the old secret fails verification.
    """

    __slots__ = ("_secret", "_algorithm", "_access_ttl", "_refresh_ttl", "_clock")

    def __init__(
        self,
        secret: SecretStr | str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=24),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        raw = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
        if not raw:
            raise ValueError("Token signing secret must be non-empty")
        object.__setattr__(self, "_secret", raw)
        object.__setattr__(self, "_algorithm", algorithm)
        object.__setattr__(self, "_access_ttl", access_ttl)
        object.__setattr__(self, "_refresh_ttl", refresh_ttl)
        object.__setattr__(self, "_clock", clock or (lambda: datetime.now(UTC)))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("TokenService is immutable")

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def access_ttl(self) -> timedelta:
        return self._access_ttl

    @property
    def refresh_ttl(self) -> timedelta:
        return self._refresh_ttl

    def issue(
        self,
        subject_id: str | int,
        kind: str | None = None,
        ttl: timedelta | None = None,
    ) -> str:
        """Create a signed token with sub, iat, exp, jti and (when given) kind."""
        now = self._clock()
        expire = now + (ttl if ttl is not None else self._access_ttl)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "iat": now,
            "exp": expire,
            "jti": uuid.uuid4().hex,
        }
        if kind:
            payload["kind"] = kind
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue_access(self, subject_id: str | int) -> str:
        return self.issue(subject_id, ttl=self._access_ttl)

    def issue_refresh(self, subject_id: str | int) -> str:
        return self.issue(subject_id, kind=REFRESH_KIND, ttl=self._refresh_ttl)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the decoded claims.

        Expiry is judged against this service's clock, not the wall clock.

        Raises InvalidSignatureError, ExpiredTokenError or MalformedTokenError.
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "iat", "exp", "jti"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        # InvalidSignatureError subclasses DecodeError, so it must be caught first.
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError(str(e)) from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError(str(e)) from e

        sub = payload.get("sub")
        kind = payload.get("kind")
        if not isinstance(sub, str) or not sub:
            raise MalformedTokenError("Invalid sub claim")
        if kind is not None and not isinstance(kind, str):
            raise MalformedTokenError("Invalid kind claim")
        try:
            claims = TokenClaims(
                subject_id=sub,
                kind=kind,
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                token_id=str(payload["jti"]),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedTokenError("Invalid time claims") from e
        if self._clock() >= claims.expires_at:
            raise ExpiredTokenError("Signature has expired")
        return claims


@lru_cache
def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings (read once)."""
    return TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_ttl=timedelta(seconds=settings.JWT_ACCESS_TTL_SECONDS),
        refresh_ttl=timedelta(seconds=settings.JWT_REFRESH_TTL_SECONDS),
    )
