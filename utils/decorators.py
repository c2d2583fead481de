from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from models import storage
from models.user import User
from utils.exceptions import InvalidTokenError, UnauthenticatedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityContext:
    """What a request knows about its caller. Never carries secrets."""
    id: str
    username: str
    email: str
    fullname: str
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "IdentityContext":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            fullname=user.fullname,
            avatar_url=user.avatar_url,
            cover_image_url=user.cover_image_url,
        )


def extract_access_token() -> Optional[str]:
    """Authorization header first, then the accessToken cookie, then the body."""
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth.split(" ", 1)[1].strip()
        if token:
            return token

    token = request.cookies.get("accessToken")
    if token:
        return token

    if request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict) and body.get("access_token"):
            return str(body["access_token"])
    return None


def resolve_identity(token: str) -> IdentityContext:
    issuer = current_app.extensions["token_issuer"]
    try:
        decoded = issuer.decode_access(token)
    except InvalidTokenError as exc:
        logger.info("Rejected access token: %s", exc.message)
        raise UnauthenticatedError("Invalid access token")

    user = storage.get_session().get(User, str(decoded.get("sub")))
    if user is None:
        logger.info("Access token for unknown user %s", decoded.get("sub"))
        raise UnauthenticatedError("Invalid access token")
    return IdentityContext.from_user(user)


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_access_token()
            if not token:
                raise UnauthenticatedError("Unauthorized request")
            g.current_user = resolve_identity(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_optional():
    """Like jwt_required, but a missing or bad token just means anonymous."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = None
            token = extract_access_token()
            if token:
                try:
                    g.current_user = resolve_identity(token)
                except UnauthenticatedError:
                    g.current_user = None
            return fn(*args, **kwargs)

        return wrapper

    return decorator
