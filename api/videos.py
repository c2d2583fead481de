from __future__ import annotations

from flask import Blueprint, request

from utils.decorators import jwt_optional, jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("videos", __name__, url_prefix="/videos")


@bp.get("")
@jwt_optional()
def list_videos():
    """
    List published videos (an owner browsing their own channel also sees drafts)
    ---
    tags:
      - Videos
    parameters:
      - in: query
        name: query
        type: string
        description: Case-insensitive search on title and description
      - in: query
        name: user_id
        type: string
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: sort
        type: string
        description: "created_at, updated_at, views, title, duration; prefix with '-' for descending"
    responses:
      200:
        description: Paginated videos
    """
    result = deps.videos().list(
        query=request.args.get("query"),
        user_id=request.args.get("user_id"),
        viewer_id=deps.viewer_id(),
        request=parse_page_request("-created_at"),
    )
    return api_response(result, "Videos fetched successfully")


@bp.post("")
@jwt_required()
def publish_video():
    """
    Upload a video (multipart: videoFile, thumbnail, title, description). Created as a draft.
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: videoFile
        type: file
        required: true
      - in: formData
        name: thumbnail
        type: file
        required: true
      - in: formData
        name: title
        type: string
        required: true
      - in: formData
        name: description
        type: string
        required: true
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    video_path = deps.staged_upload("videoFile", "video")
    thumbnail_path = deps.staged_upload("thumbnail", "image")
    video = deps.videos().publish(deps.actor_id(), deps.payload(), video_path, thumbnail_path)
    return api_response(video, "Video uploaded successfully", 201)


@bp.get("/<video_id>")
@jwt_optional()
def get_video(video_id: str):
    """
    Watch a video: counts a view and records it in the reader's history
    ---
    tags:
      - Videos
    parameters:
      - in: path
        name: video_id
        type: string
        required: true
    responses:
      200:
        description: OK
      403:
        description: Video is not published
      404:
        description: Not found
    """
    return api_response(deps.videos().get(video_id, deps.viewer_id()), "Video fetched successfully")


@bp.patch("/<video_id>")
@jwt_required()
def update_video(video_id: str):
    """
    Update title, description and/or thumbnail (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: path
        name: video_id
        type: string
        required: true
      - in: formData
        name: thumbnail
        type: file
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
    """
    thumbnail_path = deps.staged_upload("thumbnail", "image")
    video = deps.videos().update(deps.actor_id(), video_id, deps.payload(), thumbnail_path=thumbnail_path)
    return api_response(video, "Video updated successfully")


@bp.delete("/<video_id>")
@jwt_required()
def delete_video(video_id: str):
    """
    Delete a video with its comments, likes and playlist entries (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    responses:
      200:
        description: Deleted
      403:
        description: Not the owner
    """
    deps.videos().delete(deps.actor_id(), video_id)
    return api_response({}, "Video deleted successfully")


@bp.patch("/toggle/publish/<video_id>")
@jwt_required()
def toggle_publish(video_id: str):
    """
    Flip the published flag (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    responses:
      200:
        description: New publish state
    """
    state = deps.videos().toggle_publish(deps.actor_id(), video_id)
    return api_response(state, "Publish status toggled successfully")
