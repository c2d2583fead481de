"""
Per-request wiring of the services: the scoped DB session plus the token
issuer and media storage built once in create_app.
"""
from flask import current_app, g, request

from models import storage
from utils.uploads import save_upload
from services import (
    CommentService,
    DashboardService,
    LikeService,
    PlaylistService,
    SubscriptionService,
    TweetService,
    UserService,
    VideoService,
)


def token_issuer():
    return current_app.extensions["token_issuer"]


def media_storage():
    return current_app.extensions["media_storage"]


def actor_id():
    """Id of the authenticated caller; only valid behind jwt_required."""
    return g.current_user.id


def viewer_id():
    """Id of the caller if any; None for anonymous requests."""
    user = getattr(g, "current_user", None)
    return user.id if user is not None else None


def users() -> UserService:
    return UserService(storage.get_session(), token_issuer(), media_storage())


def videos() -> VideoService:
    return VideoService(storage.get_session(), media_storage())


def comments() -> CommentService:
    return CommentService(storage.get_session())


def tweets() -> TweetService:
    return TweetService(storage.get_session())


def playlists() -> PlaylistService:
    return PlaylistService(storage.get_session())


def likes() -> LikeService:
    return LikeService(storage.get_session())


def subscriptions() -> SubscriptionService:
    return SubscriptionService(storage.get_session())


def dashboard() -> DashboardService:
    return DashboardService(storage.get_session())


def payload() -> dict:
    """JSON body, or the form fields of a multipart request."""
    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    return request.form.to_dict()


def staged_upload(field: str, kind: str):
    """Stage request.files[field] in the upload temp dir; None when absent."""
    file = request.files.get(field)
    if file is None or not file.filename:
        return None
    return save_upload(file, current_app.config["UPLOAD_TEMP_DIR"], kind)
