from __future__ import annotations

from flask import Blueprint

from utils.decorators import jwt_optional, jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("comments", __name__, url_prefix="/comments")


@bp.get("/<video_id>")
@jwt_optional()
def list_comments(video_id: str):
    """
    Comments on a video, newest first
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: video_id
        type: string
        required: true
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
    responses:
      200:
        description: Paginated comments
      403:
        description: Video is not published
      404:
        description: Video not found
    """
    result = deps.comments().list_for_video(video_id, parse_page_request("-created_at"), deps.viewer_id())
    return api_response(result, "Comments fetched successfully")


@bp.post("/<video_id>")
@jwt_required()
def add_comment(video_id: str):
    """
    Comment on a video
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
    responses:
      201:
        description: Created
    """
    comment = deps.comments().add(deps.actor_id(), video_id, deps.payload())
    return api_response(comment, "Comment added successfully", 201)


@bp.patch("/c/<comment_id>")
@jwt_required()
def update_comment(comment_id: str):
    """
    Edit a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
    """
    comment = deps.comments().update(deps.actor_id(), comment_id, deps.payload())
    return api_response(comment, "Comment updated successfully")


@bp.delete("/c/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete a comment and its likes (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200:
        description: Deleted
      403:
        description: Not the owner
    """
    deps.comments().delete(deps.actor_id(), comment_id)
    return api_response({}, "Comment deleted successfully")
