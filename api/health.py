import logging

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from utils.exceptions import DependencyError

from .responses import api_response

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

bp = Blueprint("health", __name__)


@bp.get("/healthcheck")
def healthcheck():
    """
    Liveness plus a database round-trip
    ---
    tags:
      - Health
    responses:
      200:
        description: Server is up and running
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                status:
                  type: string
                  example: ok
                version:
                  type: string
                  example: 1.0.0
                database:
                  type: string
                  example: ok
                media_backend:
                  type: string
                  example: local
      500:
        description: Database unreachable
    """
    try:
        storage.get_session().execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check could not reach the database: %s", exc)
        raise DependencyError("Database unavailable") from exc

    return api_response(
        {
            "status": "ok",
            "version": API_VERSION,
            "database": "ok",
            "media_backend": current_app.config.get("MEDIA_BACKEND", "local"),
        },
        "Server is up and running",
    )
