from flask import Blueprint, jsonify, request
from flask_login import login_required
from leaderboard.api import json_body
from leaderboard.errors import ValidationError
from leaderboard.services import scores as score_service
from leaderboard.services.pager import page_scores
from leaderboard.socketio_events import notify_leaderboard


scores = Blueprint('scores', __name__)

UPDATABLE_FIELDS = ('score', 'score_val', 'user_name', 'user_id', 'extra')


@scores.route('', methods=['POST'])
@login_required
def create_score():
    data = json_body()
    missing = [f for f in ('game_hex_id', 'score', 'user_name', 'user_id') if data.get(f) is None]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    record = score_service.create_score(
        data['game_hex_id'],
        data['score'],
        data['user_name'],
        data['user_id'],
        score_val=data.get('score_val'),
        extra=data.get('extra'),
    )
    if record.deleted_at is None:
        notify_leaderboard(record.game_hex_id, 'score_created', score=record.to_dict())
    return jsonify(record.to_dict()), 201


@scores.route('', methods=['GET'])
@login_required
def list_scores():
    args = request.args
    page = page_scores(
        game_hex_id=args.get('game_hex_id'),
        sort_by=args.get('sort_by'),
        order=args.get('order'),
        limit=args.get('limit'),
        cursor=args.get('cursor'),
    )
    return jsonify(page.to_dict())


@scores.route('/<int:score_id>', methods=['GET'])
@login_required
def get_score(score_id):
    return jsonify(score_service.get_score(score_id).to_dict())


@scores.route('/<int:score_id>', methods=['PUT'])
@login_required
def update_score(score_id):
    data = json_body()
    changes = {f: data.get(f) for f in UPDATABLE_FIELDS}
    record = score_service.update_score(score_id, **changes)
    notify_leaderboard(record.game_hex_id, 'score_updated', score=record.to_dict())
    return jsonify(record.to_dict())


@scores.route('/<int:score_id>', methods=['DELETE'])
@login_required
def delete_score(score_id):
    record = score_service.soft_delete_score(score_id)
    notify_leaderboard(record.game_hex_id, 'score_deleted', score_id=record.id)
    return '', 204


@scores.route('/<int:score_id>/restore', methods=['POST'])
@login_required
def restore_score(score_id):
    record = score_service.restore_score(score_id)
    notify_leaderboard(record.game_hex_id, 'score_restored', score=record.to_dict())
    return jsonify(record.to_dict())
