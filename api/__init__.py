from __future__ import annotations

from typing import Any, Mapping, Optional

from flasgger import Swagger
from flask import Blueprint, Flask, send_from_directory
from flask_cors import CORS

from models import storage  # DBStorage singleton (scoped_session)
from utils.media import LocalMediaStorage, build_media_storage
from utils.security import TokenIssuer

from .config import get_config
from .errors import register_error_handlers
from .log_config import setup_logging

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Video Platform API",
        "version": "1.0.0",
        "description": "REST API for a video-sharing platform: users, videos, comments, likes, "
                       "playlists, subscriptions, tweets and channel dashboards.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    The token issuer and media storage are built once here and kept in
    app.extensions; request handlers hand them to the services.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    setup_logging(app)

    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    # Raises TokenSigningError when a secret is missing, so a misconfigured app never starts
    app.extensions["token_issuer"] = TokenIssuer.from_config(app.config)
    app.extensions["media_storage"] = build_media_storage(app.config)

    # Cross-Origin Resource Sharing; cookies are part of the session
    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=origins != "*")

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    from .auth import bp as auth_bp
    from .comments import bp as comments_bp
    from .dashboard import bp as dashboard_bp
    from .health import bp as health_bp
    from .likes import bp as likes_bp
    from .playlists import bp as playlists_bp
    from .subscriptions import bp as subscriptions_bp
    from .tweets import bp as tweets_bp
    from .users import bp as users_bp
    from .videos import bp as videos_bp

    api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")
    for bp in (
        health_bp,
        auth_bp,
        users_bp,
        videos_bp,
        comments_bp,
        likes_bp,
        playlists_bp,
        subscriptions_bp,
        tweets_bp,
        dashboard_bp,
    ):
        api_v1.register_blueprint(bp)
    app.register_blueprint(api_v1)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    if isinstance(app.extensions["media_storage"], LocalMediaStorage):
        media_url = app.config.get("MEDIA_BASE_URL", "/media").rstrip("/")

        @app.route(f"{media_url}/<path:filename>")
        def media_file(filename):
            return send_from_directory(app.extensions["media_storage"].root, filename)

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Video Platform API",
            "docs": "/apidocs/",
            "health": "/api/v1/healthcheck",
        }, 200

    return app
