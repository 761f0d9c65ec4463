"""
JSON error handlers for the business error taxonomy
"""
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from fieldservice.buisness.errors import FieldServiceError, StorageError
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.routes.errors")


def register_error_handlers(app):

    @app.errorhandler(FieldServiceError)
    def handle_business_error(error):
        if isinstance(error, StorageError):
            # Details were logged where the storage failure happened
            logger.error(f"Storage error on {request.method} {request.path}")
        else:
            logger.info(f"{type(error).__name__} on {request.method} {request.path}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code
