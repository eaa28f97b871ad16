import json
from datetime import datetime, timezone

from flask import current_app, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException


class APIError(Exception):
    """An error surfaced to the client as a JSON envelope."""

    def __init__(self, message, status_code=400, error_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details


def error_response(message, error_code=None, details=None):
    payload = {
        'success': False,
        'message': message,
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
    if error_code:
        payload['error_code'] = error_code
    if details is not None:
        payload['details'] = details
    return payload


def json_body(req):
    """The request's JSON body; anything but an object is a client error."""
    data = req.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise APIError('Request body must be a JSON object', 400, 'VALIDATION_ERROR')
    return data


def register_error_handlers(flask_app):
    from fungame import db

    @flask_app.errorhandler(APIError)
    def handle_api_error(exc):
        return jsonify(error_response(exc.message, exc.error_code, exc.details)), exc.status_code

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        details = json.loads(exc.json(include_url=False))
        return jsonify(error_response('Validation error', 'VALIDATION_ERROR', details)), 400

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        code = (exc.name or 'error').upper().replace(' ', '_')
        return jsonify(error_response(exc.description or exc.name, code)), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        current_app.logger.exception(f"[error] unhandled {type(exc).__name__}: {exc}")
        details = None
        if current_app.debug:
            details = {'name': type(exc).__name__, 'message': str(exc)}
        return jsonify(error_response('Internal server error', 'INTERNAL_SERVER_ERROR', details)), 500
