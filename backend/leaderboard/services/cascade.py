"""Game visibility and its cascade onto the game's scores.

Deleting a game stamps every visible score of that game with the game's
deletion instant. Restoring clears only the scores carrying exactly that
instant, so a score deleted on its own earlier stays deleted. Each
transition is a single unit of work: the game row and its scores change
together or not at all.

Two unrelated deletions landing on the same microsecond would be
indistinguishable here.
"""

from dataclasses import dataclass
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from leaderboard.errors import CascadeFailed, NotFound
from leaderboard.models import Game, Score, utcnow
from leaderboard.services.transaction import unit_of_work
from leaderboard.validation import normalize_hex_id


@dataclass
class CascadeResult:
    game: Game
    affected_scores: int
    instant: datetime


def _apply_to_scores(hex_id, match, deleted_at) -> int:
    try:
        return (
            Score.query
            .filter(Score.game_hex_id == hex_id, match)
            .update({Score.deleted_at: deleted_at}, synchronize_session=False)
        )
    except SQLAlchemyError as exc:
        raise CascadeFailed(f'Failed to update scores for game {hex_id}') from exc


def soft_delete_game(hex_id, now=None) -> CascadeResult:
    hex_id = normalize_hex_id(hex_id)
    instant = now or utcnow()
    with unit_of_work():
        game = (
            Game.query
            .filter(Game.hex_id == hex_id, Game.deleted_at.is_(None))
            .with_for_update()
            .first()
        )
        if game is None:
            raise NotFound('Game not found')
        game.deleted_at = instant
        game.updated_at = instant
        affected = _apply_to_scores(hex_id, Score.deleted_at.is_(None), instant)
    current_app.logger.info(f"[cascade-delete] game={hex_id} scores={affected} at={instant.isoformat()}")
    return CascadeResult(game=game, affected_scores=affected, instant=instant)


def restore_game(hex_id, now=None) -> CascadeResult:
    hex_id = normalize_hex_id(hex_id)
    with unit_of_work():
        game = (
            Game.query
            .filter(Game.hex_id == hex_id, Game.deleted_at.isnot(None))
            .with_for_update()
            .first()
        )
        if game is None:
            raise NotFound('Game not found or not deleted')
        prior = game.deleted_at
        game.deleted_at = None
        game.updated_at = now or utcnow()
        affected = _apply_to_scores(hex_id, Score.deleted_at == prior, None)
    current_app.logger.info(f"[cascade-restore] game={hex_id} scores={affected} deleted_at={prior.isoformat()}")
    return CascadeResult(game=game, affected_scores=affected, instant=prior)
