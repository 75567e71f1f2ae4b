"""Typed failures raised by the leaderboard core.

Services raise these; only the HTTP layer turns them into responses, via the
handlers registered in `register_error_handlers`.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class LeaderboardError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(LeaderboardError):
    status_code = 422
    message = 'Invalid request'


class InvalidParameter(ValidationError):
    """A malformed path or query parameter rather than a bad request body."""
    status_code = 400
    message = 'Invalid parameter'


class InvalidLimit(InvalidParameter):
    message = 'limit must be a positive integer'


class CursorMalformed(InvalidParameter):
    message = 'Invalid cursor'


class CursorTypeMismatch(InvalidParameter):
    message = 'Cursor does not match the requested sort'


class Unauthorized(LeaderboardError):
    status_code = 401
    message = 'Unauthorized'


class NotFound(LeaderboardError):
    status_code = 404
    message = 'Not found'


class Conflict(LeaderboardError):
    status_code = 409
    message = 'Conflict'


class CascadeFailed(LeaderboardError):
    status_code = 500
    message = 'Failed to update scores for game'


class AllocationExhausted(LeaderboardError):
    status_code = 503
    message = 'Could not allocate a unique game identifier'


def register_error_handlers(flask_app):
    @flask_app.errorhandler(LeaderboardError)
    def handle_leaderboard_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'error': exc.description or exc.name}), exc.code
