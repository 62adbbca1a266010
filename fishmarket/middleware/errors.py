"""
Error Handling Middleware
Renders service, validation and database errors as consistent JSON bodies
"""
from flask import jsonify
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from fishmarket.infra.db import db
from fishmarket.infra.log import get_logger
from fishmarket.services.errors import ServiceError
from fishmarket.services.request_context import get_request_id

logger = get_logger(__name__)


def error_response(code: str, message: str, status_code: int, **extra):
    body = {
        'error': code,
        'message': message,
        'request_id': get_request_id(),
    }
    body.update(extra)
    return jsonify(body), status_code


def validation_details(e: PydanticValidationError):
    return [
        {
            'field': '.'.join(str(part) for part in err.get('loc', ())) or None,
            'message': err.get('msg'),
        }
        for err in e.errors()
    ]


def register_error_handlers(app):
    """Register JSON error handlers for the whole application"""

    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        db.session.rollback()
        return error_response(e.code, e.message, e.status_code)

    @app.errorhandler(PydanticValidationError)
    def handle_validation_error(e):
        return error_response(
            'validation_error', 'Request validation failed', 400,
            details=validation_details(e),
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        """Handle database integrity errors (foreign key, unique constraint)"""
        db.session.rollback()
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)
        logger.error(f"Database integrity error: {error_msg}")

        if 'unique' in error_msg.lower() or 'duplicate' in error_msg.lower():
            return error_response('conflict', 'This entry already exists', 409)
        if 'foreign key' in error_msg.lower():
            return error_response('not_found', 'Referenced entity does not exist', 404)
        return error_response('validation_error', 'Data integrity constraint violated', 400)

    @app.errorhandler(OperationalError)
    def handle_operational_error(e):
        """Handle database operational errors (connection, table not found, etc.)"""
        db.session.rollback()
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)
        logger.error(f"Database operational error: {error_msg}")
        return error_response('database_error', 'Database operation failed. Please try again later.', 503)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        code = (e.name or 'error').lower().replace(' ', '_')
        return error_response(code, e.description or e.name, e.code or 500)
