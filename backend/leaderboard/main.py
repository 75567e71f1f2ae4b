from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from leaderboard import db
from leaderboard.models import isoformat, utcnow

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the leaderboard API!'})

@main.route('/health')
def health_check():
    """Liveness plus a round trip to the database. No API key required."""
    timestamp = isoformat(utcnow())
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[health] database check failed: {exc}")
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(exc),
            'timestamp': timestamp,
        }), 503
    return jsonify({'status': 'healthy', 'database': 'connected', 'timestamp': timestamp})
