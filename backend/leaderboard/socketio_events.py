from flask import request
from flask_socketio import join_room, leave_room, emit
from leaderboard import socketio
from leaderboard.auth import check_api_key, key_from_request
from leaderboard.errors import InvalidParameter
from leaderboard.validation import normalize_hex_id

NAMESPACE = '/ws'


def room_for(hex_id: str) -> str:
    return f"game:{hex_id}"


def handle_connect(auth=None):
    provided = (auth or {}).get('api_key') if isinstance(auth, dict) else None
    if not check_api_key(provided or key_from_request(request)):
        # Refuse the connection
        return False
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def _room_from(data):
    try:
        return room_for(normalize_hex_id((data or {}).get('game_hex_id')))
    except InvalidParameter as exc:
        emit('error', {'message': exc.message})
        return None


def handle_join_game(data):
    room = _room_from(data)
    if room is None:
        return
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_game(data):
    room = _room_from(data)
    if room is None:
        return
    leave_room(room)
    emit('left', {'room': room})


def notify_leaderboard(hex_id: str, event: str, **payload) -> None:
    """Tell clients watching a game that its leaderboard changed. Call after commit."""
    message = {'game_hex_id': hex_id, 'event': event}
    message.update(payload)
    socketio.emit('leaderboard_update', message, to=room_for(hex_id), namespace=NAMESPACE)


def register_socketio_handlers() -> None:
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('join_game', handle_join_game, namespace=NAMESPACE)
    socketio.on_event('leave_game', handle_leave_game, namespace=NAMESPACE)
