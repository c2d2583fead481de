from __future__ import annotations

from flask import Blueprint

from utils.decorators import jwt_optional, jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("playlists", __name__, url_prefix="/playlists")


@bp.post("")
@jwt_required()
def create_playlist():
    """
    Create a playlist
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [title]
          properties:
            title: { type: string }
            description: { type: string }
            privacy: { type: string, enum: [public, private, unlisted], default: public }
    responses:
      201:
        description: Created
    """
    playlist = deps.playlists().create(deps.actor_id(), deps.payload())
    return api_response(playlist, "Playlist created successfully", 201)


@bp.get("/user/<user_id>")
@jwt_optional()
def user_playlists(user_id: str):
    """
    A user's playlists; other viewers only see the public ones
    ---
    tags:
      - Playlists
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: query
        name: sort
        type: string
        description: "created_at, updated_at, title, views (default -updated_at)"
    responses:
      200:
        description: Paginated playlists with total_videos
    """
    result = deps.playlists().list_for_user(user_id, deps.viewer_id(), parse_page_request("-updated_at"))
    return api_response(result, "Playlists fetched successfully")


@bp.get("/<playlist_id>")
@jwt_optional()
def get_playlist(playlist_id: str):
    """
    A playlist with its published videos
    ---
    tags:
      - Playlists
    responses:
      200:
        description: Playlist with videos, total_videos and total_duration
      403:
        description: Private playlist
      404:
        description: Not found
    """
    return api_response(deps.playlists().get(playlist_id, deps.viewer_id()), "Playlist fetched successfully")


@bp.patch("/<playlist_id>")
@jwt_required()
def update_playlist(playlist_id: str):
    """
    Update title, description or privacy (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
    """
    playlist = deps.playlists().update(deps.actor_id(), playlist_id, deps.payload())
    return api_response(playlist, "Playlist updated successfully")


@bp.delete("/<playlist_id>")
@jwt_required()
def delete_playlist(playlist_id: str):
    """
    Delete a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    responses:
      200:
        description: Deleted
    """
    deps.playlists().delete(deps.actor_id(), playlist_id)
    return api_response({}, "Playlist deleted successfully")


@bp.patch("/add/<video_id>/<playlist_id>")
@jwt_required()
def add_video(video_id: str, playlist_id: str):
    """
    Append a published video to a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    responses:
      200:
        description: Updated playlist
      400:
        description: Video already present or not published
    """
    playlist = deps.playlists().add_video(deps.actor_id(), video_id, playlist_id)
    return api_response(playlist, "Video added to playlist successfully")


@bp.patch("/remove/<video_id>/<playlist_id>")
@jwt_required()
def remove_video(video_id: str, playlist_id: str):
    """
    Remove a video from a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    responses:
      200:
        description: Updated playlist
    """
    playlist = deps.playlists().remove_video(deps.actor_id(), video_id, playlist_id)
    return api_response(playlist, "Video removed from playlist successfully")
