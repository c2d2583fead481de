"""
Authentication blueprint:
- POST /users/register
- POST /users/login
- POST /users/refresh-token
- POST /users/logout

Login and refresh hand out a new access/refresh pair, both in the body and as
http-only cookies (accessToken / refreshToken). Only the most recently issued
refresh token is accepted; logout forgets it.
"""
from __future__ import annotations

from flask import Blueprint, current_app, request

from utils.decorators import jwt_required
from utils.security import TokenPair

from . import deps
from .responses import api_response

bp = Blueprint("auth", __name__, url_prefix="/users")


def _set_session_cookies(resp, pair: TokenPair):
    issuer = deps.token_issuer()
    options = {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
        "samesite": current_app.config.get("COOKIE_SAMESITE", "Lax"),
    }
    resp.set_cookie("accessToken", pair.access_token, max_age=issuer.access_expires_in, **options)
    resp.set_cookie("refreshToken", pair.refresh_token, max_age=issuer.refresh_expires_in, **options)
    return resp


def _clear_session_cookies(resp):
    options = {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
        "samesite": current_app.config.get("COOKIE_SAMESITE", "Lax"),
    }
    resp.delete_cookie("accessToken", **options)
    resp.delete_cookie("refreshToken", **options)
    return resp


def _presented_refresh_token():
    token = request.cookies.get("refreshToken")
    if token:
        return token
    body = request.get_json(silent=True) if request.is_json else None
    if isinstance(body, dict) and body.get("refresh_token"):
        return str(body["refresh_token"])
    return request.headers.get("X-Refresh-Token")


@bp.post("/register")
def register():
    """
    Register a new user (JSON or multipart with optional avatar / coverImage files)
    ---
    tags:
      - Auth
    consumes:
      - application/json
      - multipart/form-data
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [fullname, email, username, password]
          properties:
            fullname: { type: string }
            email: { type: string }
            username: { type: string }
            password: { type: string, minLength: 8 }
    responses:
      201:
        description: Created
      400:
        description: Validation error or user already exists
    """
    data = deps.payload()
    avatar_path = deps.staged_upload("avatar", "image")
    cover_path = deps.staged_upload("coverImage", "image")
    user = deps.users().register(data, avatar_path=avatar_path, cover_image_path=cover_path)
    return api_response(user, "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login with username or email; returns tokens and sets session cookies
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns user, access_token and refresh_token)
      401:
        description: Invalid user credentials
    """
    user, pair = deps.users().login(deps.payload())
    resp, status = api_response(
        {"user": user, "access_token": pair.access_token, "refresh_token": pair.refresh_token},
        "User logged in successfully",
    )
    return _set_session_cookies(resp, pair), status


@bp.post("/refresh-token")
def refresh_token():
    """
    Rotate the session: trade the current refresh token for a new pair
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            refresh_token: { type: string }
      - in: header
        name: X-Refresh-Token
        type: string
    responses:
      200:
        description: New access and refresh tokens
      401:
        description: Missing, invalid or stale refresh token
    """
    pair = deps.users().refresh(_presented_refresh_token())
    resp, status = api_response(
        {"access_token": pair.access_token, "refresh_token": pair.refresh_token},
        "Access token refreshed",
    )
    return _set_session_cookies(resp, pair), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: forget the stored refresh token and clear cookies
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    deps.users().logout(deps.actor_id())
    resp, status = api_response({}, "User logged out")
    return _clear_session_cookies(resp), status
