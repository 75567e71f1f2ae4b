import os
import sys
import pytest
from flask import g

# Ensure the backend root (containing the `leaderboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from leaderboard import create_app, db, socketio

API_KEY = 'test-api-key'


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    API_KEY = API_KEY
    API_KEY_HASH = None
    API_KEY_HEADER = 'X-API-Key'
    BCRYPT_LOG_ROUNDS = 4
    MAX_PAGE_SIZE = 100
    DEFAULT_PAGE_SIZE = 25
    IDENTIFIER_MAX_ATTEMPTS = 10
    SEED_FILE = '/nonexistent/seed.csv'
    CORS_ORIGINS = ['*']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)

    @application.teardown_request
    def forget_api_client(exc):
        # Test requests share the fixture's app context, and with it `g`
        g.pop('_login_user', None)

    with application.app_context():
        # Ensure models are imported so tables are created
        import leaderboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    test_client = flask_app.test_client()
    test_client.environ_base['HTTP_X_API_KEY'] = API_KEY
    return test_client


@pytest.fixture()
def anon_client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws',
        auth={'api_key': API_KEY},
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def make_game(client):
    def _make(name='Tetris', description=None):
        res = client.post('/games', json={'name': name, 'description': description})
        assert res.status_code == 201
        return res.get_json()
    return _make


@pytest.fixture()
def make_score(client):
    def _make(game_hex_id, score, user_name='alice', user_id='u1', **extra_fields):
        body = {'game_hex_id': game_hex_id, 'score': score, 'user_name': user_name, 'user_id': user_id}
        body.update(extra_fields)
        res = client.post('/scores', json=body)
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _make
