"""CSV backup export and seed import.

The export is denormalised: one row per score carrying its game's fields,
plus one row with empty score fields for each game that has no scores.
Soft-deleted games and scores are included.
"""

import csv
import io
import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from leaderboard import db
from leaderboard.errors import LeaderboardError
from leaderboard.models import Game, Score, isoformat
from leaderboard.services.cascade import soft_delete_game
from leaderboard.services.identifiers import insert_game
from leaderboard.services.scores import create_score
from leaderboard.validation import normalize_hex_id, validate_game_name

EXPORT_COLUMNS = [
    'game_hex_id',
    'game_name',
    'game_description',
    'game_created_at',
    'game_updated_at',
    'game_deleted_at',
    'score_id',
    'score_value',
    'score_val',
    'user_name',
    'user_id',
    'extra',
    'score_submitted_at',
    'score_updated_at',
    'score_deleted_at',
]


def export_rows():
    pairs = (
        db.session.query(Game, Score)
        .outerjoin(Score, Score.game_hex_id == Game.hex_id)
        .order_by(Game.created_at, Game.id, Score.submitted_at, Score.id)
    )
    for game, score in pairs:
        row = {
            'game_hex_id': game.hex_id,
            'game_name': game.name,
            'game_description': game.description or '',
            'game_created_at': isoformat(game.created_at),
            'game_updated_at': isoformat(game.updated_at),
            'game_deleted_at': isoformat(game.deleted_at) or '',
        }
        if score is None:
            row.update({column: '' for column in EXPORT_COLUMNS[6:]})
        else:
            row.update({
                'score_id': score.id,
                'score_value': score.score,
                'score_val': repr(score.score_val),
                'user_name': score.user_name,
                'user_id': score.user_id,
                'extra': json.dumps(score.extra) if score.extra is not None else '',
                'score_submitted_at': isoformat(score.submitted_at),
                'score_updated_at': isoformat(score.updated_at),
                'score_deleted_at': isoformat(score.deleted_at) or '',
            })
        yield row


def write_csv(stream) -> int:
    writer = csv.DictWriter(stream, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    count = 0
    for row in export_rows():
        writer.writerow(row)
        count += 1
    return count


def export_csv() -> str:
    output = io.StringIO()
    count = write_csv(output)
    current_app.logger.info(f"[export] rows={count}")
    return output.getvalue()


def backup_filename(now=None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"leaderboard_backup_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def parse_timestamp(value) -> Optional[datetime]:
    """ISO-8601 text to naive UTC; None for blank, ValueError for garbage."""
    if value is None or not value.strip():
        return None
    parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass
class SeedReport:
    games_created: int = 0
    games_failed: int = 0
    scores_created: int = 0
    scores_failed: int = 0
    skipped: Optional[str] = None


def _score_fields(row):
    """Importable score columns of a row, or None when the row carries no score."""
    try:
        score_id = int(row.get('score_id') or 0)
    except ValueError:
        return None
    user_name = row.get('user_name') or ''
    user_id = row.get('user_id') or ''
    score_value = row.get('score_value')
    score_val = row.get('score_val')
    if score_id <= 0 or not user_name or not user_id or score_value is None or not score_val:
        return None
    extra = None
    if row.get('extra'):
        try:
            extra = json.loads(row['extra'])
        except ValueError:
            extra = None
    return {
        'score': score_value,
        'score_val': float(score_val),
        'user_name': user_name,
        'user_id': user_id,
        'extra': extra,
    }


def seed_from_csv(path) -> SeedReport:
    """Import a CSV backup into an empty database.

    Games keep their identifiers and creation time; scores get fresh ids.
    Bad rows are logged and counted, never fatal.
    """
    log = current_app.logger
    visible_games = Game.query.filter(Game.deleted_at.is_(None)).count()
    if visible_games > 0:
        log.info(f"[seed-skip] database already contains {visible_games} games")
        return SeedReport(skipped='not_empty')
    if not os.path.exists(path):
        log.info(f"[seed-skip] seed file {path} does not exist")
        return SeedReport(skipped='missing_file')

    log.info(f"[seed] importing from {path}")
    games = {}
    scores = []
    report = SeedReport()
    with open(path, newline='', encoding='utf-8') as handle:
        for line_no, row in enumerate(csv.DictReader(handle), start=2):
            try:
                hex_id = normalize_hex_id(row.get('game_hex_id'))
                created_at = parse_timestamp(row.get('game_created_at'))
                game_deleted_at = parse_timestamp(row.get('game_deleted_at'))
            except (LeaderboardError, ValueError) as exc:
                log.warning(f"[seed-row] line={line_no} invalid game fields: {exc}, skipping")
                continue
            if hex_id not in games:
                games[hex_id] = {
                    'name': row.get('game_name') or '',
                    'description': row.get('game_description') or None,
                    'created_at': created_at,
                    'deleted_at': game_deleted_at,
                }
            try:
                fields = _score_fields(row)
            except ValueError as exc:
                log.warning(f"[seed-row] line={line_no} invalid score_val: {exc}, skipping score")
                report.scores_failed += 1
                continue
            if fields is None:
                continue
            try:
                submitted_at = parse_timestamp(row.get('score_submitted_at'))
            except ValueError:
                log.warning(f"[seed-row] line={line_no} invalid score timestamp, using current time")
                submitted_at = None
            try:
                fields['deleted_at'] = parse_timestamp(row.get('score_deleted_at'))
            except ValueError:
                fields['deleted_at'] = None
            scores.append((hex_id, submitted_at, fields))

    created = set()
    for hex_id, game in games.items():
        try:
            validate_game_name(game['name'])
            insert_game(hex_id, game['name'], game['description'], created_at=game['created_at'])
        except (LeaderboardError, SQLAlchemyError) as exc:
            log.warning(f"[seed-game] hex_id={hex_id} failed: {exc}, continuing")
            report.games_failed += 1
            continue
        created.add(hex_id)
        report.games_created += 1

    for hex_id, submitted_at, fields in scores:
        if hex_id not in created:
            report.scores_failed += 1
            continue
        try:
            create_score(hex_id, submitted_at=submitted_at, **fields)
        except (LeaderboardError, SQLAlchemyError) as exc:
            log.warning(f"[seed-score] game={hex_id} user={fields['user_name']} failed: {exc}, continuing")
            report.scores_failed += 1
            continue
        report.scores_created += 1

    # Deleted games go through the cascade so their remaining scores follow
    for hex_id in created:
        deleted_at = games[hex_id]['deleted_at']
        if deleted_at is not None:
            soft_delete_game(hex_id, now=deleted_at)

    if report.games_failed or report.scores_failed:
        log.warning(
            f"[seed] completed with failures: games={report.games_created}/{report.games_created + report.games_failed} "
            f"scores={report.scores_created}/{report.scores_created + report.scores_failed}"
        )
    else:
        log.info(f"[seed] games={report.games_created} scores={report.scores_created} from {path}")
    return report
