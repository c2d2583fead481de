"""
Accounts: registration, credentials, profile and channel views.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from models.schemas.user import (
    ChangePasswordSchema,
    UserCreateSchema,
    UserLoginSchema,
    UserOutSchema,
    UserUpdateSchema,
)
from models.schemas.video import VideoOutSchema
from models.subscription import Subscription
from models.user import User, watch_history
from models.video import Video
from services.base import ResourceService
from services.sessions import SessionStore
from utils.exceptions import (
    ApiError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from utils.media import MediaStorage
from utils.security import TokenIssuer, TokenPair, hash_password, verify_password
from utils.uploads import discard

logger = logging.getLogger(__name__)

DUPLICATE_USER = "User with email or username already exists"

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_update_schema = UserUpdateSchema()
change_password_schema = ChangePasswordSchema()
user_out_schema = UserOutSchema()
videos_out_schema = VideoOutSchema(many=True)


class UserService(ResourceService):
    def __init__(self, session, issuer: Optional[TokenIssuer] = None, media: Optional[MediaStorage] = None):
        super().__init__(session)
        self.issuer = issuer
        self.media = media

    @property
    def sessions(self) -> SessionStore:
        return SessionStore(self.session, self.issuer)

    def view(self, user: User) -> Dict[str, Any]:
        return user_out_schema.dump(user)

    def get(self, user_id) -> User:
        return self._get(User, user_id, "user")

    # ------------------------------------------------------------------
    # Registration and sessions
    # ------------------------------------------------------------------

    def register(
        self,
        payload,
        avatar_path: Optional[str] = None,
        cover_image_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            data = self._validate(user_create_schema, payload)
            if self._identity_taken(data["username"], data["email"]):
                raise ValidationError(DUPLICATE_USER)
        except ApiError:
            discard(avatar_path)
            discard(cover_image_path)
            raise

        user = User(
            username=data["username"],
            email=data["email"],
            fullname=data["fullname"],
            password_hash=hash_password(data["password"]),
        )
        avatar = None
        if avatar_path:
            try:
                avatar = self.media.upload(avatar_path)
            except ApiError:
                discard(cover_image_path)
                raise
            user.avatar_url, user.avatar_public_id = avatar.url, avatar.public_id

        try:
            if cover_image_path:
                cover = self.media.upload(cover_image_path)
                user.cover_image_url, user.cover_image_public_id = cover.url, cover.public_id
            self.session.add(user)
            self._commit()
        except (ApiError, IntegrityError) as exc:
            if avatar is not None:
                self.media.discard(avatar.public_id, avatar.resource_type)
            if user.cover_image_public_id:
                self.media.discard(user.cover_image_public_id, "image")
            if isinstance(exc, IntegrityError):
                # lost a race with a concurrent registration
                raise ValidationError(DUPLICATE_USER) from exc
            raise
        logger.info("Registered user %s", user.username)
        return self.view(user)

    def _identity_taken(self, username: str, email: str) -> bool:
        query = self.session.query(User).filter(or_(User.username == username, User.email == email))
        return query.first() is not None

    def _email_taken(self, email: str, user_id) -> bool:
        return self.session.query(User).filter(User.email == email, User.id != user_id).first() is not None

    def login(self, payload) -> Tuple[Dict[str, Any], TokenPair]:
        data = self._validate(user_login_schema, payload)
        query = self.session.query(User)
        if data.get("username"):
            query = query.filter(User.username == data["username"])
        else:
            query = query.filter(User.email == data["email"])
        user = query.first()

        if user is None or not verify_password(data["password"], user.password_hash):
            logger.info("Failed login for %s", data.get("username") or data.get("email"))
            raise UnauthenticatedError("Invalid user credentials")

        pair = self.sessions.rotate(user.id)
        return self.view(user), pair

    def refresh(self, refresh_token: Optional[str]) -> TokenPair:
        if not refresh_token:
            raise UnauthenticatedError("Unauthorized request")
        user = self.sessions.validate_refresh(refresh_token)
        return self.sessions.rotate(user.id)

    def logout(self, actor_id) -> None:
        self.sessions.invalidate(actor_id)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def change_password(self, actor_id, payload) -> None:
        data = self._validate(change_password_schema, payload)
        user = self.get(actor_id)
        if not verify_password(data["old_password"], user.password_hash):
            raise ValidationError("Invalid old password")
        user.password_hash = hash_password(data["new_password"])
        self._commit()

    def update_account(self, actor_id, payload) -> Dict[str, Any]:
        data = self._validate(user_update_schema, payload)
        user = self.get(actor_id)
        email = data.get("email")
        if email and email != user.email:
            if self._email_taken(email, user.id):
                raise ValidationError("Email is already in use")
        for key, value in data.items():
            setattr(user, key, value)
        try:
            self._commit()
        except IntegrityError as exc:
            raise ValidationError("Email is already in use") from exc
        return self.view(user)

    def _replace_image(self, actor_id, local_path: Optional[str], attr: str) -> Dict[str, Any]:
        if not local_path:
            raise ValidationError(f"{attr.replace('_', ' ').capitalize()} file is missing")
        try:
            user = self.get(actor_id)
        except ApiError:
            discard(local_path)
            raise
        stored = self.media.upload(local_path)
        old_public_id = getattr(user, f"{attr}_public_id")
        setattr(user, f"{attr}_url", stored.url)
        setattr(user, f"{attr}_public_id", stored.public_id)
        self._commit()
        self.media.discard(old_public_id, "image")
        return self.view(user)

    def update_avatar(self, actor_id, local_path: Optional[str]) -> Dict[str, Any]:
        return self._replace_image(actor_id, local_path, "avatar")

    def update_cover_image(self, actor_id, local_path: Optional[str]) -> Dict[str, Any]:
        return self._replace_image(actor_id, local_path, "cover_image")

    # ------------------------------------------------------------------
    # Channel views
    # ------------------------------------------------------------------

    def channel_profile(self, username: str, viewer_id=None) -> Dict[str, Any]:
        username = (username or "").strip().lower()
        if not username:
            raise ValidationError("Username is missing")
        user = self.session.query(User).filter(User.username == username).first()
        if user is None:
            raise NotFoundError("Channel does not exist")

        subscribers = (
            self.session.query(func.count(Subscription.id))
            .filter(Subscription.channel_id == user.id)
            .scalar()
        )
        subscribed_to = (
            self.session.query(func.count(Subscription.id))
            .filter(Subscription.subscriber_id == user.id)
            .scalar()
        )
        is_subscribed = False
        if viewer_id is not None:
            is_subscribed = (
                self.session.query(Subscription.id)
                .filter_by(subscriber_id=str(viewer_id), channel_id=user.id)
                .first()
                is not None
            )

        profile = self.view(user)
        profile.pop("email", None)
        profile.update(
            subscribers_count=subscribers or 0,
            channels_subscribed_to_count=subscribed_to or 0,
            is_subscribed=is_subscribed,
        )
        return profile

    def watch_history(self, actor_id) -> list:
        rows = (
            self.session.query(Video)
            .join(watch_history, watch_history.c.video_id == Video.id)
            .filter(watch_history.c.user_id == str(actor_id))
            .order_by(watch_history.c.watched_at.desc())
            .all()
        )
        return videos_out_schema.dump(rows)
