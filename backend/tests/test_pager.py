import pytest

from leaderboard.errors import CursorTypeMismatch, InvalidLimit
from leaderboard.services import cursor as cursor_codec
from leaderboard.services.identifiers import create_game
from leaderboard.services.pager import page_games, page_scores, resolve_limit
from leaderboard.services.ranking import Direction, SortMode, score_ranking
from leaderboard.services.scores import create_score, soft_delete_score


def _walk(limit, **kwargs):
    seen = []
    cursor = None
    while True:
        page = page_scores(limit=limit, cursor=cursor, **kwargs)
        seen.extend(page.data)
        if not page.has_more:
            assert page.next_cursor is None
            return seen
        cursor = page.next_cursor


def test_ties_break_on_id(flask_app):
    game = create_game('Ties')
    first = create_score(game.hex_id, '100', 'a', 'u1')
    second = create_score(game.hex_id, '100', 'b', 'u2')
    third = create_score(game.hex_id, '50', 'c', 'u3')

    page = page_scores(game_hex_id=game.hex_id, limit=1)
    assert [s.id for s in page.data] == [first.id]
    assert page.has_more
    page = page_scores(game_hex_id=game.hex_id, limit=1, cursor=page.next_cursor)
    assert [s.id for s in page.data] == [second.id]
    page = page_scores(game_hex_id=game.hex_id, limit=1, cursor=page.next_cursor)
    assert [s.id for s in page.data] == [third.id]
    assert page.has_more is False


def test_two_per_page_over_tied_scores(flask_app):
    game = create_game('Ties')
    first = create_score(game.hex_id, '100', 'a', 'u1')
    second = create_score(game.hex_id, '100', 'b', 'u2')
    third = create_score(game.hex_id, '50', 'c', 'u3')
    ranking = score_ranking(SortMode.SCORE)

    page = page_scores(game_hex_id=game.hex_id, sort_by='score', order='desc', limit=2)
    assert [s.id for s in page.data] == [first.id, second.id]
    assert page.has_more is True
    assert page.current_cursor is None
    position = cursor_codec.decode(page.next_cursor, ranking, Direction.DESC)
    assert (position.key, position.id) == (100.0, second.id)

    token = page.next_cursor
    page = page_scores(game_hex_id=game.hex_id, sort_by='score', order='desc', limit=2, cursor=token)
    assert [s.id for s in page.data] == [third.id]
    assert page.has_more is False
    assert page.next_cursor is None
    assert page.current_cursor == token


def test_cursor_replayed_in_the_other_order_is_rejected(flask_app):
    game = create_game('Flip')
    for value in ('1', '2', '3'):
        create_score(game.hex_id, value, 'a', 'u1')
    page = page_scores(game_hex_id=game.hex_id, order='desc', limit=1)
    with pytest.raises(CursorTypeMismatch):
        page_scores(game_hex_id=game.hex_id, order='asc', limit=1, cursor=page.next_cursor)


@pytest.mark.parametrize('sort_by,order', [
    ('score', 'desc'), ('score', 'asc'),
    ('date', 'desc'), ('date', 'asc'),
    ('user_name', 'asc'), ('user_name', 'desc'),
])
def test_walk_is_complete_and_ordered(flask_app, sort_by, order):
    game = create_game('Walk')
    values = ['5', '3', '5', '9', '1', '3', '7', '5']
    names = ['dan', 'Bea', 'amy', 'bea', 'Cal', 'eve', 'AMY', 'fay']
    created = [create_score(game.hex_id, v, n, f'u{i}') for i, (v, n) in enumerate(zip(values, names))]

    seen = _walk(3, game_hex_id=game.hex_id, sort_by=sort_by, order=order)
    assert sorted(s.id for s in seen) == sorted(s.id for s in created)

    ranking = score_ranking(SortMode(sort_by))
    direction = Direction(order)
    keys = [ranking.sort_key(direction, s) for s in seen]
    assert keys == sorted(keys)


def test_deleted_scores_are_skipped(flask_app):
    game = create_game('Skip')
    kept = create_score(game.hex_id, '1', 'a', 'u1')
    dropped = create_score(game.hex_id, '2', 'b', 'u2')
    soft_delete_score(dropped.id)
    page = page_scores(game_hex_id=game.hex_id)
    assert [s.id for s in page.data] == [kept.id]


def test_exact_page_has_no_more(flask_app):
    game = create_game('Exact')
    for i in range(3):
        create_score(game.hex_id, str(i), 'a', 'u1')
    page = page_scores(game_hex_id=game.hex_id, limit=3)
    assert page.total_returned == 3
    assert page.has_more is False
    assert page.next_cursor is None


def test_resolve_limit(flask_app):
    assert resolve_limit(None) == 25
    assert resolve_limit('') == 25
    assert resolve_limit('10') == 10
    assert resolve_limit(500) == 100
    for bad in (0, -1, 'abc', '1.5', True):
        with pytest.raises(InvalidLimit):
            resolve_limit(bad)


def test_cursor_from_other_sort_is_rejected(flask_app):
    game = create_game('Mixed')
    for i in range(2):
        create_score(game.hex_id, str(i), 'a', 'u1')
    page = page_scores(game_hex_id=game.hex_id, sort_by='date', limit=1)
    with pytest.raises(CursorTypeMismatch):
        page_scores(game_hex_id=game.hex_id, sort_by='score', limit=1, cursor=page.next_cursor)
    with pytest.raises(CursorTypeMismatch):
        page_games(limit=1, cursor=page.next_cursor)


def test_page_games_skips_deleted(flask_app):
    from leaderboard.services.cascade import soft_delete_game
    visible = create_game('Visible')
    hidden = create_game('Hidden')
    soft_delete_game(hidden.hex_id)
    page = page_games()
    assert [g.hex_id for g in page.data] == [visible.hex_id]
