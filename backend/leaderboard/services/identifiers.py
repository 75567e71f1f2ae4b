"""Public game identifiers: six characters of [0-9a-z].

Generation is stateless. Uniqueness is owned by the unique constraint on
``game.hex_id``; the existence check below only avoids pointless inserts, so a
concurrent request can still win the race and the insert reports `Conflict`.
Identifiers of soft-deleted games stay taken forever.
"""

import random

from flask import current_app
from sqlalchemy.exc import IntegrityError

from leaderboard import db
from leaderboard.errors import AllocationExhausted, Conflict
from leaderboard.models import Game, utcnow
from leaderboard.services.transaction import unit_of_work
from leaderboard.validation import (
    IDENTIFIER_ALPHABET,
    IDENTIFIER_LENGTH,
    validate_description,
    validate_game_name,
)

DEFAULT_MAX_ATTEMPTS = 10


def generate_identifier(rng=random):
    return ''.join(rng.choices(IDENTIFIER_ALPHABET, k=IDENTIFIER_LENGTH))


def identifier_taken(hex_id: str) -> bool:
    return db.session.query(Game.id).filter(Game.hex_id == hex_id).first() is not None


def _max_attempts(max_attempts=None) -> int:
    if max_attempts is None:
        max_attempts = current_app.config.get('IDENTIFIER_MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)
    return max(1, int(max_attempts))


def allocate_identifier(max_attempts=None, generate=None) -> str:
    """Return an identifier not yet assigned to any game, live or deleted."""
    generate = generate or generate_identifier
    attempts = _max_attempts(max_attempts)
    for attempt in range(1, attempts + 1):
        candidate = generate()
        if not identifier_taken(candidate):
            return candidate
        current_app.logger.info(f"[allocate-collision] candidate={candidate} attempt={attempt}/{attempts}")
    current_app.logger.error(f"[allocate-exhausted] attempts={attempts}")
    raise AllocationExhausted()


def insert_game(hex_id, name, description=None, created_at=None, deleted_at=None) -> Game:
    """Persist a game under ``hex_id``; `Conflict` if another game already holds it."""
    now = utcnow()
    created_at = created_at or now
    game = Game(
        hex_id=hex_id,
        name=name,
        description=description,
        created_at=created_at,
        updated_at=deleted_at or created_at,
        deleted_at=deleted_at,
    )
    try:
        with unit_of_work() as session:
            session.add(game)
    except IntegrityError:
        if identifier_taken(hex_id):
            raise Conflict(f'Game id {hex_id} is already assigned')
        raise
    return game


def create_game(name, description=None, max_attempts=None, generate=None) -> Game:
    """Create a game under a freshly allocated identifier.

    Collisions seen by the pre-check and lost insert races draw on one
    attempt budget.
    """
    validate_game_name(name)
    validate_description(description)
    generate = generate or generate_identifier
    attempts = _max_attempts(max_attempts)
    for attempt in range(1, attempts + 1):
        hex_id = generate()
        if identifier_taken(hex_id):
            current_app.logger.info(f"[allocate-collision] candidate={hex_id} attempt={attempt}/{attempts}")
            continue
        try:
            game = insert_game(hex_id, name, description)
        except Conflict:
            current_app.logger.warning(f"[allocate-conflict] candidate={hex_id} attempt={attempt}/{attempts}")
            continue
        current_app.logger.info(f"[game-create] hex_id={game.hex_id} attempts={attempt}")
        return game
    current_app.logger.error(f"[allocate-exhausted] attempts={attempts}")
    raise AllocationExhausted()
