import logging
from http import HTTPStatus

from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, ImmatureSignatureError, PyJWTError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing."""


class LibraryError(Exception):
    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    status = HTTPStatus.BAD_REQUEST


class UnauthorizedError(LibraryError):
    status = HTTPStatus.UNAUTHORIZED


class ForbiddenError(LibraryError):
    status = HTTPStatus.FORBIDDEN


class NotFoundError(LibraryError):
    status = HTTPStatus.NOT_FOUND


class ConflictError(LibraryError):
    status = HTTPStatus.CONFLICT


def register_error_handlers(api):
    """Attach the error taxonomy to a flask-restx ``Api``; every error body is ``{"error": ...}``."""

    @api.errorhandler(LibraryError)
    def handle_library_error(error):
        if error.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("Unhandled library error: %s", error.message)
        return {"error": error.message}, error.status

    @api.errorhandler(JWTExtendedException)
    def handle_auth_error(error):
        logger.warning("Rejected request: %s", error)
        return {"error": str(error) or "Authorization required"}, HTTPStatus.UNAUTHORIZED

    @api.errorhandler(PyJWTError)
    def handle_token_error(error):
        if isinstance(error, ExpiredSignatureError):
            message = "Token expired"
        elif isinstance(error, ImmatureSignatureError):
            message = "Token not valid yet"
        else:
            message = "Invalid token"
        logger.warning("Rejected token: %s", error)
        return {"error": message}, HTTPStatus.UNAUTHORIZED

    @api.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        logger.error("Database error", exc_info=error)
        return {"error": "Database error"}, HTTPStatus.INTERNAL_SERVER_ERROR

    return api
