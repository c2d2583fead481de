from __future__ import annotations

from flask import Blueprint

from utils.decorators import jwt_optional, jwt_required

from . import deps
from .responses import api_response

bp = Blueprint("users", __name__, url_prefix="/users")


@bp.post("/change-password")
@jwt_required()
def change_password():
    """
    Change the current user's password
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [old_password, new_password]
          properties:
            old_password: { type: string }
            new_password: { type: string, minLength: 8 }
    responses:
      200:
        description: Password changed
      400:
        description: Invalid old password or weak new password
    """
    deps.users().change_password(deps.actor_id(), deps.payload())
    return api_response({}, "Password changed successfully")


@bp.get("/current-user")
@jwt_required()
def current_user():
    """
    Get current user info
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    service = deps.users()
    return api_response(service.view(service.get(deps.actor_id())), "Current user fetched successfully")


@bp.patch("/update-account-details")
@jwt_required()
def update_account():
    """
    Update fullname and/or email
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            fullname: { type: string }
            email: { type: string }
    responses:
      200:
        description: Updated user
      400:
        description: Validation error
    """
    user = deps.users().update_account(deps.actor_id(), deps.payload())
    return api_response(user, "Account details updated successfully")


@bp.patch("/avatar")
@jwt_required()
def update_avatar():
    """
    Replace the avatar (multipart field `avatar`)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: avatar
        type: file
        required: true
    responses:
      200:
        description: Updated user
    """
    path = deps.staged_upload("avatar", "image")
    user = deps.users().update_avatar(deps.actor_id(), path)
    return api_response(user, "Avatar updated successfully")


@bp.patch("/cover-image")
@jwt_required()
def update_cover_image():
    """
    Replace the cover image (multipart field `coverImage`)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: coverImage
        type: file
        required: true
    responses:
      200:
        description: Updated user
    """
    path = deps.staged_upload("coverImage", "image")
    user = deps.users().update_cover_image(deps.actor_id(), path)
    return api_response(user, "Cover image updated successfully")


@bp.get("/c/<username>")
@jwt_optional()
def channel_profile(username: str):
    """
    Public channel profile with subscriber counts
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: username
        type: string
        required: true
    responses:
      200:
        description: Channel profile
      404:
        description: Channel does not exist
    """
    profile = deps.users().channel_profile(username, deps.viewer_id())
    return api_response(profile, "User channel fetched successfully")


@bp.get("/history")
@jwt_required()
def watch_history():
    """
    Videos the current user has watched, most recent first
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    return api_response(deps.users().watch_history(deps.actor_id()), "Watch history fetched successfully")
