from __future__ import annotations

from typing import Any, Dict

from models.comment import Comment
from models.like import Like, LikeKind, LikeTarget
from models.schemas.video import VideoOutSchema
from models.tweet import Tweet
from models.video import Video
from services.base import PageRequest, ResourceService, parse_id
from utils.exceptions import ForbiddenError

TARGET_MODELS = {
    LikeKind.VIDEO: Video,
    LikeKind.COMMENT: Comment,
    LikeKind.TWEET: Tweet,
}

video_out_schema = VideoOutSchema()


class LikeService(ResourceService):
    sort_columns = {"created_at": Like.created_at}

    def toggle(self, actor_id, target: LikeTarget) -> Dict[str, bool]:
        """Like the target, or remove the like if it already exists."""
        label = target.kind.value
        resource = self._get(TARGET_MODELS[target.kind], target.id, label)
        video = resource if target.kind == LikeKind.VIDEO else getattr(resource, "video", None)
        if video is not None and not video.is_visible_to(actor_id):
            raise ForbiddenError("This video is not published")
        liked = self._toggle(
            Like,
            liked_by_id=str(actor_id),
            target_kind=target.kind,
            target_id=resource.id,
        )
        return {"liked": liked}

    def count(self, target: LikeTarget) -> int:
        return (
            self.session.query(Like)
            .filter(Like.target_kind == target.kind, Like.target_id == parse_id(target.id, target.kind.value))
            .count()
        )

    def liked_videos(self, actor_id, request: PageRequest = PageRequest()) -> Dict[str, Any]:
        """Videos the actor liked, most recent like first. Unpublished videos are left out."""
        query = (
            self.session.query(Like, Video)
            .join(Video, Video.id == Like.target_id)
            .filter(
                Like.liked_by_id == str(actor_id),
                Like.target_kind == LikeKind.VIDEO,
                Video.is_published.is_(True),
            )
        )

        def serialize(row):
            like, video = row
            return {"liked_at": like.created_at.isoformat(), "video": video_out_schema.dump(video)}

        return self._paginate(query, request, serialize)
