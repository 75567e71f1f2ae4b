"""API-key authentication.

Every protected request carries the key in a header (``X-API-Key`` unless
configured otherwise). The configured key is only kept as a bcrypt hash.
"""

from flask import current_app, jsonify, request
from flask_login import UserMixin

from leaderboard import bcrypt, login_manager


class ApiClient(UserMixin):
    """The single principal a valid API key authenticates as."""
    id = 'api-client'


def init_api_key(flask_app):
    key = flask_app.config.get('API_KEY')
    if not flask_app.config.get('API_KEY_HASH') and key and key.strip():
        flask_app.config['API_KEY_HASH'] = bcrypt.generate_password_hash(key).decode('utf-8')
    if not flask_app.config.get('API_KEY_HASH'):
        flask_app.logger.warning("[auth] no API key configured; protected routes will reject every request")


def check_api_key(provided) -> bool:
    key_hash = current_app.config.get('API_KEY_HASH')
    if not key_hash or not provided or not provided.strip():
        return False
    try:
        return bcrypt.check_password_hash(key_hash, provided)
    except ValueError:
        current_app.logger.error("[auth] configured API key hash is not a valid bcrypt hash")
        return False


def key_from_request(req=None):
    req = req or request
    return req.headers.get(current_app.config.get('API_KEY_HEADER', 'X-API-Key'))


@login_manager.request_loader
def load_client_from_request(req):
    if check_api_key(key_from_request(req)):
        return ApiClient()
    return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'error': 'Unauthorized'}), 401
