from __future__ import annotations

from flask import Blueprint

from utils.decorators import jwt_optional, jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("tweets", __name__, url_prefix="/tweets")


@bp.post("")
@jwt_required()
def create_tweet():
    """
    Post a tweet (1 to 280 characters)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string, maxLength: 280 }
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    tweet = deps.tweets().create(deps.actor_id(), deps.payload())
    return api_response(tweet, "Tweet created successfully", 201)


@bp.get("/user/<user_id>")
@jwt_optional()
def user_tweets(user_id: str):
    """
    A user's tweets with likes_count and is_liked for the viewer
    ---
    tags:
      - Tweets
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200:
        description: Paginated tweets
      404:
        description: User not found
    """
    result = deps.tweets().list_for_user(user_id, deps.viewer_id(), parse_page_request("-created_at"))
    return api_response(result, "Tweets fetched successfully")


@bp.patch("/<tweet_id>")
@jwt_required()
def update_tweet(tweet_id: str):
    """
    Edit a tweet (owner only)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
      404:
        description: Not found
    """
    tweet = deps.tweets().update(deps.actor_id(), tweet_id, deps.payload())
    return api_response(tweet, "Tweet updated successfully")


@bp.delete("/<tweet_id>")
@jwt_required()
def delete_tweet(tweet_id: str):
    """
    Delete a tweet and its likes (owner only)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    responses:
      200:
        description: Deleted
      403:
        description: Not the owner
    """
    deps.tweets().delete(deps.actor_id(), tweet_id)
    return api_response({}, "Tweet deleted successfully")
