"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access/refresh token issuing and verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import InvalidTokenError, TokenSigningError

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Mints and verifies the two token kinds.

    Access tokens carry the user's id plus denormalized profile fields and are
    never stored. Refresh tokens carry the id only, are signed with their own
    secret, and are persisted on the user row by the session store.
    """

    ACCESS = "access"
    REFRESH = "refresh"

    def __init__(
        self,
        access_secret: str | None,
        access_expires: timedelta,
        refresh_secret: str | None,
        refresh_expires: timedelta,
        algorithm: str = "HS256",
        issuer: str = "video-platform-api",
    ):
        if not access_secret:
            raise TokenSigningError("ACCESS_TOKEN_SECRET is not configured")
        if not refresh_secret:
            raise TokenSigningError("REFRESH_TOKEN_SECRET is not configured")
        self._secrets = {self.ACCESS: access_secret, self.REFRESH: refresh_secret}
        self._expires = {self.ACCESS: access_expires, self.REFRESH: refresh_expires}
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenIssuer":
        return cls(
            access_secret=config.get("ACCESS_TOKEN_SECRET"),
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_secret=config.get("REFRESH_TOKEN_SECRET"),
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "video-platform-api"),
        )

    @property
    def access_expires_in(self) -> int:
        return int(self._expires[self.ACCESS].total_seconds())

    @property
    def refresh_expires_in(self) -> int:
        return int(self._expires[self.REFRESH].total_seconds())

    def issue_access(self, user) -> str:
        return self._encode(
            self.ACCESS,
            str(user.id),
            {"username": user.username, "email": user.email, "fullname": user.fullname},
        )

    def issue_refresh(self, user) -> str:
        return self._encode(self.REFRESH, str(user.id), {})

    def decode_access(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.ACCESS)

    def decode_refresh(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.REFRESH)

    def _encode(self, token_type: str, subject: str, claims: Dict[str, Any]) -> str:
        now = _now()
        payload = {
            "iss": self.issuer,
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires[token_type]).timestamp()),
            "type": token_type,
            "jti": generate_jti(),
            **claims,
        }
        try:
            return jwt.encode(payload, self._secrets[token_type], algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise TokenSigningError(f"Could not sign {token_type} token: {exc}") from exc

    def _decode(self, token: str, expected_type: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT. Raises InvalidTokenError on invalid signature,
        expiry, or when the token is not of the expected type.
        """
        if not token:
            raise InvalidTokenError("Token is missing")
        try:
            decoded = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}")

        if decoded.get("type") != expected_type:
            raise InvalidTokenError("Wrong token type")
        return decoded
