"""Sort modes and the total order each one imposes on records.

Every ranking is (primary key in the requested direction, id ascending). The
id tie-break is fixed regardless of direction, so two records never compare
equal and "strictly after (primary, id)" is always a well-defined page
boundary.
"""

import enum
import functools
from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy import and_, or_

from leaderboard.errors import InvalidParameter
from leaderboard.models import Game, Score, fold_name


class SortMode(str, enum.Enum):
    SCORE = 'score'
    DATE = 'date'
    USER_NAME = 'user_name'


class Direction(str, enum.Enum):
    ASC = 'asc'
    DESC = 'desc'


class KeyKind(str, enum.Enum):
    """Type of a primary key; cursors carry it as their tag."""
    NUMBER = 'num'
    TIMESTAMP = 'ts'
    TEXT = 'text'


@dataclass(frozen=True)
class Ranking:
    name: str
    kind: KeyKind
    column: Any
    tiebreak: Any
    extract: Callable[[Any], Any]
    default_direction: Direction

    def primary_key(self, record):
        return self.extract(record)

    def order_by(self, direction):
        primary = self.column.asc() if direction is Direction.ASC else self.column.desc()
        return [primary, self.tiebreak.asc()]

    def seek_predicate(self, direction, key, last_id):
        """Rows strictly after (key, last_id) in this ranking's order."""
        beyond = self.column > key if direction is Direction.ASC else self.column < key
        return or_(beyond, and_(self.column == key, self.tiebreak > last_id))

    def sort_key(self, direction, record):
        primary = self.extract(record)
        if direction is Direction.DESC:
            primary = _Descending(primary)
        return (primary, record.id)


@functools.total_ordering
class _Descending:
    __slots__ = ('value',)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return self.value == other.value

    def __lt__(self, other):
        return self.value > other.value


SCORE_RANKINGS = {
    SortMode.SCORE: Ranking(
        'score', KeyKind.NUMBER, Score.score_val, Score.id,
        lambda s: s.score_val, Direction.DESC,
    ),
    SortMode.DATE: Ranking(
        'date', KeyKind.TIMESTAMP, Score.submitted_at, Score.id,
        lambda s: s.submitted_at, Direction.DESC,
    ),
    SortMode.USER_NAME: Ranking(
        'user_name', KeyKind.TEXT, Score.user_name_key, Score.id,
        lambda s: fold_name(s.user_name), Direction.ASC,
    ),
}

# Games list newest first
GAME_RANKING = Ranking(
    'created_at', KeyKind.TIMESTAMP, Game.created_at, Game.id,
    lambda g: g.created_at, Direction.DESC,
)


def parse_sort_mode(value) -> SortMode:
    if value is None or value == '':
        return SortMode.SCORE
    try:
        return SortMode(value)
    except ValueError:
        allowed = ', '.join(m.value for m in SortMode)
        raise InvalidParameter(f'Invalid sort_by {value!r}; expected one of {allowed}')


def parse_direction(value, ranking: Ranking) -> Direction:
    if value is None or value == '':
        return ranking.default_direction
    try:
        return Direction(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidParameter(f"Invalid order {value!r}; expected 'asc' or 'desc'")


def score_ranking(mode) -> Ranking:
    return SCORE_RANKINGS[SortMode(mode)]
