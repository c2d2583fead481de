from __future__ import annotations

from flask import Blueprint, request

from utils.decorators import jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@bp.get("/stats")
@jwt_required()
def channel_stats():
    """
    Channel statistics for the current user
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200:
        description: overview, recent_activity and top_performing
    """
    return api_response(deps.dashboard().channel_stats(deps.actor_id()), "Channel stats fetched successfully")


@bp.get("/videos")
@jwt_required()
def channel_videos():
    """
    The current user's videos with engagement counts
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    parameters:
      - in: query
        name: status
        type: string
        enum: [all, published, draft]
        default: all
      - in: query
        name: sort
        type: string
        description: "created_at, updated_at, views, title, duration; prefix with '-' for descending"
    responses:
      200:
        description: Paginated videos with likes_count, comments_count, engagement
    """
    result = deps.dashboard().channel_videos(
        deps.actor_id(),
        parse_page_request("-created_at"),
        status=request.args.get("status", "all"),
    )
    return api_response(result, "Channel videos fetched successfully")
