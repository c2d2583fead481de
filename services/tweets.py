from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import func

from models.like import Like, LikeKind
from models.schemas.tweet import TweetCreateSchema, TweetOutSchema, TweetUpdateSchema
from models.tweet import Tweet
from models.user import User
from services.base import OwnedResourceService, PageRequest


class TweetService(OwnedResourceService):
    model = Tweet
    label = "tweet"
    plural = "tweets"
    create_schema = TweetCreateSchema()
    update_schema = TweetUpdateSchema()
    out_schema = TweetOutSchema()

    sort_columns = {
        "created_at": Tweet.created_at,
        "updated_at": Tweet.updated_at,
    }

    def _before_delete(self, tweet: Tweet) -> None:
        self.session.query(Like).filter(
            Like.target_kind == LikeKind.TWEET,
            Like.target_id == tweet.id,
        ).delete(synchronize_session=False)

    def list_for_user(self, user_id, viewer_id=None, request: PageRequest = PageRequest()) -> Dict[str, Any]:
        owner = self._get(User, user_id, "user")

        likes_count = (
            self.session.query(func.count(Like.id))
            .filter(Like.target_kind == LikeKind.TWEET, Like.target_id == Tweet.id)
            .correlate(Tweet)
            .scalar_subquery()
        )
        query = (
            self.session.query(Tweet, likes_count.label("likes_count"))
            .filter(Tweet.owner_id == owner.id)
        )
        count_query = self.session.query(Tweet).filter(Tweet.owner_id == owner.id)

        liked_ids = set()
        if viewer_id is not None:
            liked_ids = {
                row.target_id
                for row in self.session.query(Like.target_id).filter(
                    Like.liked_by_id == str(viewer_id),
                    Like.target_kind == LikeKind.TWEET,
                )
            }

        def serialize(row):
            tweet, count = row
            item = self.view(tweet)
            item["likes_count"] = count or 0
            item["is_liked"] = tweet.id in liked_ids
            return item

        return self._paginate(query, request, serialize, count_query=count_query)
