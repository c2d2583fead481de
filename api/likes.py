from __future__ import annotations

from flask import Blueprint

from models.like import LikeTarget
from utils.decorators import jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("likes", __name__, url_prefix="/likes")


def _toggle(target: LikeTarget):
    state = deps.likes().toggle(deps.actor_id(), target)
    verb = "liked" if state["liked"] else "unliked"
    return api_response(state, f"{target.kind.value.capitalize()} {verb} successfully")


@bp.post("/toggle/v/<video_id>")
@jwt_required()
def toggle_video_like(video_id: str):
    """
    Like or unlike a video
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - in: path
        name: video_id
        type: string
        required: true
    responses:
      200:
        description: "{liked: bool}"
      404:
        description: Video not found
    """
    return _toggle(LikeTarget.video(video_id))


@bp.post("/toggle/c/<comment_id>")
@jwt_required()
def toggle_comment_like(comment_id: str):
    """
    Like or unlike a comment
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    responses:
      200:
        description: "{liked: bool}"
    """
    return _toggle(LikeTarget.comment(comment_id))


@bp.post("/toggle/t/<tweet_id>")
@jwt_required()
def toggle_tweet_like(tweet_id: str):
    """
    Like or unlike a tweet
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    responses:
      200:
        description: "{liked: bool}"
    """
    return _toggle(LikeTarget.tweet(tweet_id))


@bp.get("/videos")
@jwt_required()
def liked_videos():
    """
    Videos the current user liked
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    responses:
      200:
        description: Paginated liked videos
    """
    result = deps.likes().liked_videos(deps.actor_id(), parse_page_request("-created_at"))
    return api_response(result, "Liked videos fetched successfully")
