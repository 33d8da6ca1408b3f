"""
Error Handlers for Wordmem

Provides:
- Custom exception classes
- Consistent error response format
- Flask error handlers
"""

from flask import jsonify, request, current_app
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, Dict, Any

from .extensions import db


class WordmemError(Exception):
    """Base exception class for Wordmem."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        response = {
            'success': False,
            'message': self.message,
            'code': self.code,
        }
        if self.details:
            response['details'] = self.details
        return response


class NotFoundError(WordmemError):
    """Resource not found (or not visible to the caller)."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(WordmemError):
    """Input validation failed."""

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class AuthenticationError(WordmemError):
    """Missing token or bad credentials."""

    def __init__(self, message: str = 'Authentication required'):
        super().__init__(
            message=message,
            code='UNAUTHENTICATED',
            status_code=401
        )


class AuthorizationError(WordmemError):
    """Access denied (invalid or expired token)."""

    def __init__(self, message: str = 'Access denied'):
        super().__init__(
            message=message,
            code='FORBIDDEN',
            status_code=403
        )


class ConflictError(WordmemError):
    """Request conflicts with the current state of the resource."""

    def __init__(self, message: str = 'Conflict', details: Dict = None):
        super().__init__(
            message=message,
            code='CONFLICT',
            status_code=409,
            details=details
        )


class UpstreamError(WordmemError):
    """A remote service the request depends on failed."""

    def __init__(self, message: str = 'Upstream service failed'):
        super().__init__(
            message=message,
            code='UPSTREAM_ERROR',
            status_code=502
        )


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def validation_error_from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Flatten a pydantic error into our ValidationError."""
    errors = {}
    for item in exc.errors():
        field = '.'.join(str(part) for part in item.get('loc', ())) or '__root__'
        errors[field] = item.get('msg', 'Invalid value')
    first_field = next(iter(errors), None)
    message = f"Invalid field '{first_field}'" if first_field else 'Validation failed'
    return ValidationError(message, errors=errors)


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(WordmemError)
    def handle_wordmem_error(error):
        if error.status_code >= 500:
            current_app.logger.error(f"{error.code}: {error.message}")
        else:
            current_app.logger.info(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_payload_error(error):
        wrapped = validation_error_from_pydantic(error)
        return jsonify(wrapped.to_dict()), wrapped.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        current_app.logger.error('Database error on %s: %s', request.path, error, exc_info=True)
        return error_response('Internal server error', 'SERVER_ERROR', 500)

    @app.errorhandler(400)
    def handle_bad_request(error):
        if request.path.startswith('/api/'):
            return error_response('Malformed request', 'BAD_REQUEST', 400)
        return error

    @app.errorhandler(404)
    def handle_not_found(error):
        if request.path.startswith('/api/'):
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        if request.path.startswith('/api/'):
            return error_response('Method not allowed', 'METHOD_NOT_ALLOWED', 405)
        return error

    @app.errorhandler(413)
    def handle_too_large(error):
        return error_response('Uploaded file is too large', 'PAYLOAD_TOO_LARGE', 413)

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if request.path.startswith('/api/'):
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error
