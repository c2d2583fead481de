from __future__ import annotations

from flask import Blueprint

from utils.decorators import jwt_required
from utils.pagination import parse_page_request

from . import deps
from .responses import api_response

bp = Blueprint("subscriptions", __name__, url_prefix="/subscriptions")


@bp.post("/c/<channel_id>")
@jwt_required()
def toggle_subscription(channel_id: str):
    """
    Subscribe to or unsubscribe from a channel
    ---
    tags:
      - Subscriptions
    security:
      - Bearer: []
    parameters:
      - in: path
        name: channel_id
        type: string
        required: true
    responses:
      200:
        description: "{subscribed: bool}"
      400:
        description: Cannot subscribe to yourself
      404:
        description: Channel not found
    """
    state = deps.subscriptions().toggle(deps.actor_id(), channel_id)
    message = "Subscribed successfully" if state["subscribed"] else "Unsubscribed successfully"
    return api_response(state, message)


@bp.get("/c/<channel_id>")
def channel_subscribers(channel_id: str):
    """
    Subscribers of a channel
    ---
    tags:
      - Subscriptions
    responses:
      200:
        description: Paginated subscribers
    """
    result = deps.subscriptions().subscribers(channel_id, parse_page_request("-created_at"))
    return api_response(result, "Subscribers fetched successfully")


@bp.get("/u/<subscriber_id>")
def subscribed_channels(subscriber_id: str):
    """
    Channels a user subscribes to
    ---
    tags:
      - Subscriptions
    responses:
      200:
        description: Paginated channels
    """
    result = deps.subscriptions().subscribed_channels(subscriber_id, parse_page_request("-created_at"))
    return api_response(result, "Subscribed channels fetched successfully")
