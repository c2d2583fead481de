"""
Videos: upload, browse, watch, edit, publish toggle and delete.

Reading a published video counts as a view every time, and an
authenticated reader gets the video added to their watch history once.
Deleting a video removes everything that points at it before the row
itself; the remote media goes last and only best-effort.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, insert, or_, select

from models.comment import Comment
from models.like import Like, LikeKind
from models.playlist import playlist_videos
from models.schemas.video import VideoCreateSchema, VideoOutSchema, VideoUpdateSchema
from models.user import User, watch_history
from models.video import Video
from services.base import OwnedResourceService, PageRequest
from utils.exceptions import ApiError, ForbiddenError, ValidationError
from utils.media import MediaStorage
from utils.uploads import discard

logger = logging.getLogger(__name__)


class VideoService(OwnedResourceService):
    model = Video
    label = "video"
    plural = "videos"
    create_schema = VideoCreateSchema()
    update_schema = VideoUpdateSchema()
    out_schema = VideoOutSchema()

    sort_columns = {
        "created_at": Video.created_at,
        "updated_at": Video.updated_at,
        "views": Video.views,
        "title": Video.title,
        "duration": Video.duration,
    }

    def __init__(self, session, media: Optional[MediaStorage] = None):
        super().__init__(session)
        self.media = media

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(
        self,
        query: Optional[str] = None,
        user_id=None,
        viewer_id=None,
        request: PageRequest = PageRequest(),
    ) -> Dict[str, Any]:
        q = self.session.query(Video)
        own_channel = False
        if user_id:
            owner = self._get(User, user_id, "user")
            q = q.filter(Video.owner_id == owner.id)
            own_channel = owner.id == (str(viewer_id) if viewer_id is not None else None)
        if not own_channel:
            q = q.filter(Video.is_published.is_(True))
        if query and query.strip():
            pattern = f"%{query.strip().lower()}%"
            q = q.filter(or_(func.lower(Video.title).like(pattern), func.lower(Video.description).like(pattern)))
        return self._paginate(q, request, self.view)

    def get(self, video_id, viewer_id=None) -> Dict[str, Any]:
        video = self.load(video_id)
        if not video.is_visible_to(viewer_id):
            raise ForbiddenError("This video is not published")

        if video.is_published:
            # single UPDATE so concurrent reads never lose an increment
            self.session.query(Video).filter(Video.id == video.id).update(
                {Video.views: Video.views + 1}, synchronize_session=False
            )
            if viewer_id is not None:
                self._record_watch(str(viewer_id), video.id)
            self._commit()
            self.session.refresh(video)
        return self.view(video)

    def _record_watch(self, user_id: str, video_id: str) -> None:
        seen = self.session.execute(
            select(watch_history.c.video_id).where(
                watch_history.c.user_id == user_id,
                watch_history.c.video_id == video_id,
            )
        ).first()
        if seen is None:
            self.session.execute(insert(watch_history).values(user_id=user_id, video_id=video_id))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def publish(self, actor_id, payload, video_path: Optional[str], thumbnail_path: Optional[str]) -> Dict[str, Any]:
        """Upload both files and create the video as a draft."""
        try:
            data = self._validate(self.create_schema, payload)
            if not video_path:
                raise ValidationError("Video file is required")
            if not thumbnail_path:
                raise ValidationError("Thumbnail is required")
        except ApiError:
            discard(video_path)
            discard(thumbnail_path)
            raise

        try:
            video_file = self.media.upload(video_path)
        except ApiError:
            discard(thumbnail_path)
            raise
        try:
            thumbnail = self.media.upload(thumbnail_path)
        except ApiError:
            self.media.discard(video_file.public_id, video_file.resource_type)
            raise

        video = Video(
            owner_id=str(actor_id),
            title=data["title"],
            description=data["description"],
            video_url=video_file.url,
            video_public_id=video_file.public_id,
            thumbnail_url=thumbnail.url,
            thumbnail_public_id=thumbnail.public_id,
            duration=video_file.duration,
            is_published=False,
        )
        self.session.add(video)
        self._commit()
        logger.info("User %s uploaded video %s", actor_id, video.id)
        return self.view(video)

    def update(self, actor_id, resource_id, payload, thumbnail_path: Optional[str] = None) -> Dict[str, Any]:
        try:
            video = self.load_owned(actor_id, resource_id, action="edit")
            patch = self._validate(self.update_schema, payload)
            if not patch and not thumbnail_path:
                raise ValidationError("Nothing to update")
        except ApiError:
            discard(thumbnail_path)
            raise

        old_thumbnail = None
        if thumbnail_path:
            stored = self.media.upload(thumbnail_path)
            old_thumbnail = video.thumbnail_public_id
            video.thumbnail_url, video.thumbnail_public_id = stored.url, stored.public_id
        self._apply_patch(video, patch)
        self._commit()
        self.media.discard(old_thumbnail, "image")
        return self.view(video)

    def toggle_publish(self, actor_id, video_id) -> Dict[str, bool]:
        video = self.load_owned(actor_id, video_id, action="modify")
        video.is_published = not video.is_published
        self._commit()
        return {"is_published": video.is_published}

    def _before_delete(self, video: Video) -> None:
        comment_ids = select(Comment.id).where(Comment.video_id == video.id)
        self.session.query(Like).filter(
            or_(
                (Like.target_kind == LikeKind.VIDEO) & (Like.target_id == video.id),
                (Like.target_kind == LikeKind.COMMENT) & Like.target_id.in_(comment_ids),
            )
        ).delete(synchronize_session=False)
        self.session.query(Comment).filter(Comment.video_id == video.id).delete(synchronize_session=False)
        self.session.execute(watch_history.delete().where(watch_history.c.video_id == video.id))
        self.session.execute(playlist_videos.delete().where(playlist_videos.c.video_id == video.id))

    def delete(self, actor_id, resource_id) -> None:
        video = self.load_owned(actor_id, resource_id, action="delete")
        media = [(video.video_public_id, "video"), (video.thumbnail_public_id, "image")]
        self._before_delete(video)
        self.session.delete(video)
        self._commit()
        # playlists already in the session still hold the deleted row
        self.session.expire_all()
        for public_id, resource_type in media:
            self.media.discard(public_id, resource_type)
