from __future__ import annotations

from typing import Any, Dict

from models.comment import Comment
from models.like import Like, LikeKind
from models.schemas.comment import CommentCreateSchema, CommentOutSchema, CommentUpdateSchema
from models.video import Video
from services.base import OwnedResourceService, PageRequest
from utils.exceptions import ForbiddenError


class CommentService(OwnedResourceService):
    """Comments on a video, newest first."""

    model = Comment
    label = "comment"
    plural = "comments"
    create_schema = CommentCreateSchema()
    update_schema = CommentUpdateSchema()
    out_schema = CommentOutSchema()

    sort_columns = {
        "created_at": Comment.created_at,
        "updated_at": Comment.updated_at,
    }

    def _visible_video(self, video_id, viewer_id) -> Video:
        video = self._get(Video, video_id, "video")
        if not video.is_visible_to(viewer_id):
            raise ForbiddenError("This video is not published")
        return video

    def list_for_video(self, video_id, request: PageRequest = PageRequest(), viewer_id=None) -> Dict[str, Any]:
        video = self._visible_video(video_id, viewer_id)
        query = self.session.query(Comment).filter(Comment.video_id == video.id)
        return self._paginate(query, request, self.view)

    def add(self, actor_id, video_id, payload) -> Dict[str, Any]:
        video = self._visible_video(video_id, actor_id)
        data = self._validate(self.create_schema, payload)
        comment = Comment(owner_id=str(actor_id), video_id=video.id, **data)
        self.session.add(comment)
        self._commit()
        return self.view(comment)

    def _before_delete(self, comment: Comment) -> None:
        self.session.query(Like).filter(
            Like.target_kind == LikeKind.COMMENT,
            Like.target_id == comment.id,
        ).delete(synchronize_session=False)
