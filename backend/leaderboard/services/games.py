from flask import current_app

from leaderboard.errors import NotFound
from leaderboard.models import Game, utcnow
from leaderboard.services.transaction import unit_of_work
from leaderboard.validation import normalize_hex_id, validate_description, validate_game_name


def get_game(hex_id, include_deleted=False) -> Game:
    query = Game.query.filter(Game.hex_id == normalize_hex_id(hex_id))
    if not include_deleted:
        query = query.filter(Game.deleted_at.is_(None))
    game = query.first()
    if game is None:
        raise NotFound('Game not found')
    return game


def update_game(hex_id, name=None, description=None) -> Game:
    """Change name and/or description of a visible game; None leaves a field as is."""
    if name is not None:
        validate_game_name(name)
    validate_description(description)
    with unit_of_work():
        game = get_game(hex_id)
        if name is not None:
            game.name = name
        if description is not None:
            game.description = description
        game.updated_at = utcnow()
    current_app.logger.info(f"[game-update] hex_id={game.hex_id}")
    return game
