import logging

from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from models.schemas.common import flatten_messages
from utils.exceptions import ApiError, DependencyError

from .responses import error_response

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    # Domain errors carry their own status and message
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            logger.error("%s: %s", err.__class__.__name__, err.message, exc_info=err.__cause__ or err)
        return error_response(err.message, err.status_code, err.errors)

    # Marshmallow validation errors that escaped a service
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        return error_response("Invalid input", 400, flatten_messages(err.messages))

    # Database failures: generic message, full cause in the log
    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response(DependencyError.default_message, 500)

    # Werkzeug HTTPExceptions (404 routing, 405, 413...) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 500)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response(DependencyError.default_message, 500)
