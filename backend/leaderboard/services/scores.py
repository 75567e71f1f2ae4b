from flask import current_app

from leaderboard.errors import Conflict, NotFound
from leaderboard.models import Game, Score, utcnow
from leaderboard.services.transaction import unit_of_work
from leaderboard.validation import (
    normalize_hex_id,
    parse_score_val,
    validate_score_text,
    validate_score_val,
    validate_user_id,
    validate_user_name,
)


def _locked_game(hex_id):
    """The game row under a shared lock, refreshed from the database."""
    return (
        Game.query
        .filter(Game.hex_id == hex_id)
        .with_for_update(read=True)
        .populate_existing()
        .first()
    )


def create_score(game_hex_id, score, user_name, user_id, score_val=None, extra=None,
                 submitted_at=None, deleted_at=None) -> Score:
    """Record a score for an existing game.

    The game may be soft-deleted; the new score is then born deleted with
    the game's deletion instant so that restoring the game brings it back.
    ``submitted_at`` and ``deleted_at`` are only passed by the CSV importer.
    """
    score = validate_score_text(score)
    validate_user_name(user_name)
    validate_user_id(user_id)
    score_val = validate_score_val(score_val)
    hex_id = normalize_hex_id(game_hex_id)
    submitted_at = submitted_at or utcnow()

    with unit_of_work() as session:
        # Shared lock: a concurrent cascade either sees this score or is seen by it
        game = _locked_game(hex_id)
        if game is None:
            raise NotFound('Game not found')
        record = Score(
            game_hex_id=hex_id,
            score=score,
            score_val=score_val if score_val is not None else parse_score_val(score),
            user_name=user_name,
            user_id=user_id,
            extra=extra,
            submitted_at=submitted_at,
            updated_at=submitted_at,
            deleted_at=deleted_at or game.deleted_at,
        )
        session.add(record)
    current_app.logger.info(f"[score-create] id={record.id} game={hex_id} score_val={record.score_val}")
    return record


def get_score(score_id) -> Score:
    record = Score.query.filter(Score.id == score_id, Score.deleted_at.is_(None)).first()
    if record is None:
        raise NotFound('Score not found')
    return record


def update_score(score_id, score=None, score_val=None, user_name=None, user_id=None, extra=None) -> Score:
    """Partial update of a visible score; None leaves a field unchanged.

    A new display ``score`` without an explicit ``score_val`` re-derives the
    ranking value from it.
    """
    if score is not None:
        score = validate_score_text(score)
    score_val = validate_score_val(score_val)
    if user_name is not None:
        validate_user_name(user_name)
    if user_id is not None:
        validate_user_id(user_id)

    with unit_of_work():
        record = get_score(score_id)
        if score is not None:
            record.score = score
            if score_val is None:
                record.score_val = parse_score_val(score)
        if score_val is not None:
            record.score_val = score_val
        if user_name is not None:
            record.user_name = user_name
        if user_id is not None:
            record.user_id = user_id
        if extra is not None:
            record.extra = extra
        record.updated_at = utcnow()
    current_app.logger.info(f"[score-update] id={record.id}")
    return record


def soft_delete_score(score_id) -> Score:
    with unit_of_work():
        record = get_score(score_id)
        record.deleted_at = utcnow()
    current_app.logger.info(f"[score-delete] id={record.id} game={record.game_hex_id}")
    return record


def restore_score(score_id) -> Score:
    """Bring back an individually deleted score. Not allowed while its game is deleted."""
    with unit_of_work():
        record = Score.query.filter(Score.id == score_id, Score.deleted_at.isnot(None)).first()
        if record is None:
            raise NotFound('Score not found or not deleted')
        game = _locked_game(record.game_hex_id)
        if game is not None and game.deleted_at is not None:
            raise Conflict('Cannot restore a score while its game is deleted')
        record.deleted_at = None
    current_app.logger.info(f"[score-restore] id={record.id} game={record.game_hex_id}")
    return record
