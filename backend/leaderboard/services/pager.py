"""Keyset pagination over scores and games.

Pages seek past the last row of the previous page instead of skipping an
offset. One extra row is fetched to learn whether another page exists.
A row inserted behind the reader's position after a page was served can
still show up on a later page; offsets are never recomputed.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from flask import current_app

from leaderboard.errors import InvalidLimit
from leaderboard.models import Game, Score
from leaderboard.services import cursor as cursor_codec
from leaderboard.services.ranking import (
    GAME_RANKING,
    Direction,
    Ranking,
    parse_direction,
    parse_sort_mode,
    score_ranking,
)
from leaderboard.validation import normalize_hex_id

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100


@dataclass
class PageResult:
    data: List[Any] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None
    current_cursor: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_returned(self) -> int:
        return len(self.data)

    def to_dict(self):
        return {
            'data': [row.to_dict() for row in self.data],
            'has_more': self.has_more,
            'next_cursor': self.next_cursor,
            'current_cursor': self.current_cursor,
            'total_returned': self.total_returned,
            'page_size': self.page_size,
        }


def resolve_limit(limit=None, max_page_size=None, default=None) -> int:
    """Effective page size.

    Omitted means the configured default. Zero, negative or non-numeric
    values are caller errors; anything above the maximum is capped.
    """
    if max_page_size is None:
        max_page_size = int(current_app.config.get('MAX_PAGE_SIZE', MAX_PAGE_SIZE))
    if limit is None or limit == '':
        if default is None:
            default = int(current_app.config.get('DEFAULT_PAGE_SIZE', DEFAULT_PAGE_SIZE))
        return min(max(default, 1), max_page_size)
    if isinstance(limit, bool):
        raise InvalidLimit()
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidLimit()
    if limit < 1:
        raise InvalidLimit()
    return min(limit, max_page_size)


def paginate(query, ranking: Ranking, direction: Direction, limit=None, cursor=None) -> PageResult:
    page_size = resolve_limit(limit)
    if cursor is not None:
        position = cursor_codec.decode(cursor, ranking, direction)
        query = query.filter(ranking.seek_predicate(direction, position.key, position.id))
    rows = query.order_by(*ranking.order_by(direction)).limit(page_size + 1).all()
    has_more = len(rows) > page_size
    rows = rows[:page_size]
    next_cursor = cursor_codec.encode_record(ranking, direction, rows[-1]) if has_more else None
    return PageResult(
        data=rows,
        has_more=has_more,
        next_cursor=next_cursor,
        current_cursor=cursor,
        page_size=page_size,
    )


def page_scores(game_hex_id=None, sort_by=None, order=None, limit=None, cursor=None) -> PageResult:
    """One page of visible scores, for one game or across every visible game."""
    ranking = score_ranking(parse_sort_mode(sort_by))
    direction = parse_direction(order, ranking)
    query = Score.query.filter(Score.deleted_at.is_(None))
    if game_hex_id is not None:
        query = query.filter(Score.game_hex_id == normalize_hex_id(game_hex_id))
    else:
        query = query.join(Game, Game.hex_id == Score.game_hex_id).filter(Game.deleted_at.is_(None))
    return paginate(query, ranking, direction, limit, cursor)


def page_games(limit=None, cursor=None) -> PageResult:
    query = Game.query.filter(Game.deleted_at.is_(None))
    return paginate(query, GAME_RANKING, GAME_RANKING.default_direction, limit, cursor)
