"""
Channel analytics for the signed-in user.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict

from sqlalchemy import case, func

from models.base_model import utcnow
from models.comment import Comment
from models.like import Like, LikeKind
from models.playlist import Playlist
from models.schemas.video import VideoOutSchema
from models.subscription import Subscription
from models.video import Video
from services.base import PageRequest, ResourceService
from utils.exceptions import ValidationError

RECENT_WINDOW = timedelta(days=30)
VIDEO_STATUSES = ("all", "published", "draft")

video_out_schema = VideoOutSchema()


class DashboardService(ResourceService):
    sort_columns = {
        "created_at": Video.created_at,
        "updated_at": Video.updated_at,
        "views": Video.views,
        "title": Video.title,
        "duration": Video.duration,
    }

    def _like_counts(self, owner_id: str):
        return (
            self.session.query(Like.target_id.label("video_id"), func.count(Like.id).label("n"))
            .join(Video, Video.id == Like.target_id)
            .filter(Like.target_kind == LikeKind.VIDEO, Video.owner_id == owner_id)
            .group_by(Like.target_id)
            .subquery()
        )

    def _comment_counts(self, owner_id: str):
        return (
            self.session.query(Comment.video_id.label("video_id"), func.count(Comment.id).label("n"))
            .join(Video, Video.id == Comment.video_id)
            .filter(Video.owner_id == owner_id)
            .group_by(Comment.video_id)
            .subquery()
        )

    def channel_stats(self, actor_id) -> Dict[str, Any]:
        owner_id = str(actor_id)
        videos = (
            self.session.query(
                func.count(Video.id),
                func.coalesce(func.sum(Video.views), 0),
                func.coalesce(func.sum(Video.duration), 0),
                func.coalesce(func.sum(case((Video.is_published.is_(True), 1), else_=0)), 0),
            )
            .filter(Video.owner_id == owner_id)
            .one()
        )
        total_videos, total_views, total_duration, published = videos

        total_likes = (
            self.session.query(func.count(Like.id))
            .join(Video, Video.id == Like.target_id)
            .filter(Like.target_kind == LikeKind.VIDEO, Video.owner_id == owner_id)
            .scalar()
        )
        total_comments = (
            self.session.query(func.count(Comment.id))
            .join(Video, Video.id == Comment.video_id)
            .filter(Video.owner_id == owner_id)
            .scalar()
        )
        subscriber_count = self.session.query(Subscription).filter(Subscription.channel_id == owner_id).count()
        subscription_count = self.session.query(Subscription).filter(Subscription.subscriber_id == owner_id).count()
        playlist_count = self.session.query(Playlist).filter(Playlist.owner_id == owner_id).count()

        recent_videos, recent_views = (
            self.session.query(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .filter(Video.owner_id == owner_id, Video.created_at >= utcnow() - RECENT_WINDOW)
            .one()
        )

        top_video = (
            self.session.query(Video)
            .filter(Video.owner_id == owner_id, Video.is_published.is_(True))
            .order_by(Video.views.desc(), Video.created_at.desc())
            .first()
        )

        return {
            "overview": {
                "total_videos": total_videos or 0,
                "published_videos": int(published or 0),
                "draft_videos": (total_videos or 0) - int(published or 0),
                "total_views": int(total_views or 0),
                "total_likes": total_likes or 0,
                "total_comments": total_comments or 0,
                "total_duration": float(total_duration or 0),
                "subscriber_count": subscriber_count,
                "subscription_count": subscription_count,
                "playlist_count": playlist_count,
            },
            "recent_activity": {
                "videos_last_30_days": recent_videos or 0,
                "views_last_30_days": int(recent_views or 0),
            },
            "top_performing": {
                "top_video": (
                    {
                        "id": top_video.id,
                        "title": top_video.title,
                        "views": top_video.views,
                        "thumbnail_url": top_video.thumbnail_url,
                    }
                    if top_video is not None
                    else None
                ),
            },
        }

    def channel_videos(self, actor_id, request: PageRequest = PageRequest(), status: str = "all") -> Dict[str, Any]:
        status = (status or "all").lower()
        if status not in VIDEO_STATUSES:
            raise ValidationError(f"Invalid status: {status}. Allowed: {', '.join(VIDEO_STATUSES)}")

        owner_id = str(actor_id)
        likes = self._like_counts(owner_id)
        comments = self._comment_counts(owner_id)
        likes_n = func.coalesce(likes.c.n, 0)
        comments_n = func.coalesce(comments.c.n, 0)

        query = (
            self.session.query(Video, likes_n.label("likes_count"), comments_n.label("comments_count"))
            .outerjoin(likes, likes.c.video_id == Video.id)
            .outerjoin(comments, comments.c.video_id == Video.id)
            .filter(Video.owner_id == owner_id)
        )
        count_query = self.session.query(Video).filter(Video.owner_id == owner_id)
        if status != "all":
            published = status == "published"
            query = query.filter(Video.is_published == published)
            count_query = count_query.filter(Video.is_published == published)

        def serialize(row):
            video, likes_count, comments_count = row
            item = video_out_schema.dump(video)
            item.pop("owner", None)
            item.update(
                likes_count=likes_count,
                comments_count=comments_count,
                engagement=likes_count + comments_count,
            )
            return item

        return self._paginate(query, request, serialize, count_query=count_query)
