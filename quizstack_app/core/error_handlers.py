"""
JSON errors for the QuizStack API.

Every failure reaches the client as
``{"success": false, "message": ..., "code": ..., "details": {...}}``.
Domain code raises a ``QuizStackError`` subclass; HTTP errors raised by
Flask or its extensions (unknown route, wrong method, failed CSRF check)
are answered in the same shape.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException


def error_envelope(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return {
        'success': False,
        'message': message,
        'code': code,
        'details': details or {},
    }


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


class QuizStackError(Exception):
    """Base class of errors that map to a JSON error response."""

    code = 'UNKNOWN_ERROR'
    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = None,
        status_code: int = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code or type(self).code
        self.status_code = status_code or type(self).status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return error_envelope(self.message, self.code, self.details)


class NotFoundError(QuizStackError):
    code = 'NOT_FOUND'
    status_code = 404

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(message, details={'resource': resource} if resource else None)


class ValidationError(QuizStackError):
    """Input validation failed; ``errors`` maps fields to messages."""

    code = 'VALIDATION_ERROR'
    status_code = 400

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(message, details={'errors': errors} if errors else None)
        self.errors = errors or {}


class AuthenticationError(QuizStackError):
    code = 'UNAUTHENTICATED'
    status_code = 401

    def __init__(self, message: str = 'Authentication required'):
        super().__init__(message)


class AuthorizationError(QuizStackError):
    code = 'UNAUTHORIZED'
    status_code = 403

    def __init__(self, message: str = 'Access denied'):
        super().__init__(message)


def _http_code(error: HTTPException) -> str:
    # "Method Not Allowed" -> METHOD_NOT_ALLOWED
    return (error.name or 'HTTP error').upper().replace(' ', '_')


def register_error_handlers(app):
    """Answer every error with the JSON envelope; the app serves no HTML."""

    @app.errorhandler(QuizStackError)
    def handle_quizstack_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.info
        log("%s: %s", error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        current_app.logger.warning("CSRF check failed: %s", error.description)
        return jsonify(error_envelope(error.description, 'CSRF_FAILED')), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify(error_envelope(error.description, _http_code(error))), error.code

    @app.errorhandler(500)
    def handle_internal_error(error):
        # Flask has already logged the original exception with its traceback.
        return jsonify(error_envelope('Internal server error', 'SERVER_ERROR')), 500
