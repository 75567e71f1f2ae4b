from flask import Blueprint, jsonify, request
from flask_login import login_required
from leaderboard.api import json_body
from leaderboard.services.cascade import restore_game, soft_delete_game
from leaderboard.services.games import get_game, update_game
from leaderboard.services.identifiers import create_game
from leaderboard.services.pager import page_games
from leaderboard.socketio_events import notify_leaderboard


games = Blueprint('games', __name__)


@games.route('', methods=['POST'])
@login_required
def create_game_route():
    data = json_body()
    new_game = create_game(data.get('name'), data.get('description'))
    return jsonify(new_game.to_dict()), 201


@games.route('', methods=['GET'])
@login_required
def list_games():
    page = page_games(limit=request.args.get('limit'), cursor=request.args.get('cursor'))
    return jsonify(page.to_dict())


@games.route('/<string:hex_id>', methods=['GET'])
@login_required
def get_game_route(hex_id):
    return jsonify(get_game(hex_id).to_dict())


@games.route('/<string:hex_id>', methods=['PUT'])
@login_required
def update_game_route(hex_id):
    data = json_body()
    game = update_game(hex_id, name=data.get('name'), description=data.get('description'))
    notify_leaderboard(game.hex_id, 'game_updated')
    return jsonify(game.to_dict())


@games.route('/<string:hex_id>', methods=['DELETE'])
@login_required
def delete_game(hex_id):
    result = soft_delete_game(hex_id)
    notify_leaderboard(result.game.hex_id, 'game_deleted', affected_scores=result.affected_scores)
    return '', 204


@games.route('/<string:hex_id>/restore', methods=['POST'])
@login_required
def restore_game_route(hex_id):
    result = restore_game(hex_id)
    notify_leaderboard(result.game.hex_id, 'game_restored', affected_scores=result.affected_scores)
    payload = result.game.to_dict()
    payload['restored_scores'] = result.affected_scores
    return jsonify(payload)
