"""Opaque pagination cursors.

A cursor is the last-seen (primary key, id) pair, tagged with the sort and
direction it was issued under and the kind of primary key it holds. It is
JSON encoded and then base64url encoded without padding so it can travel in
a query string untouched. Decoding never touches the database.
"""

import base64
import binascii
import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from leaderboard.errors import CursorMalformed, CursorTypeMismatch
from leaderboard.services.ranking import Direction, KeyKind, Ranking


@dataclass(frozen=True)
class CursorPosition:
    kind: KeyKind
    key: Any
    id: int


def _encode_key(kind, key):
    if kind is KeyKind.NUMBER:
        return float(key)
    if kind is KeyKind.TIMESTAMP:
        return key.isoformat()
    return key


def encode(ranking: Ranking, direction: Direction, key, record_id: int) -> str:
    payload = {
        's': ranking.name,
        'd': Direction(direction).value,
        'k': ranking.kind.value,
        'v': _encode_key(ranking.kind, key),
        'id': int(record_id),
    }
    raw = json.dumps(payload, separators=(',', ':'), allow_nan=False).encode('utf-8')
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')


def encode_record(ranking: Ranking, direction: Direction, record) -> str:
    return encode(ranking, direction, ranking.primary_key(record), record.id)


def _load(token):
    if not isinstance(token, str) or not token:
        raise CursorMalformed()
    padded = token + '=' * (-len(token) % 4)
    try:
        raw = base64.b64decode(padded.encode('ascii'), altchars=b'-_', validate=True)
        payload = json.loads(raw.decode('utf-8'))
    except (binascii.Error, UnicodeError, ValueError):
        raise CursorMalformed()
    if not isinstance(payload, dict) or not {'s', 'd', 'k', 'v', 'id'} <= payload.keys():
        raise CursorMalformed()
    record_id = payload['id']
    if isinstance(record_id, bool) or not isinstance(record_id, int):
        raise CursorMalformed()
    try:
        kind = KeyKind(payload['k'])
        direction = Direction(payload['d'])
    except ValueError:
        raise CursorMalformed()
    if not isinstance(payload['s'], str):
        raise CursorMalformed()
    return payload['s'], direction, kind, payload['v'], record_id


def _decode_key(kind, value):
    if kind is KeyKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise CursorTypeMismatch('Cursor key is not a number')
        return float(value)
    if kind is KeyKind.TIMESTAMP:
        if not isinstance(value, str):
            raise CursorTypeMismatch('Cursor key is not a timestamp')
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise CursorTypeMismatch('Cursor key is not a timestamp')
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    if not isinstance(value, str):
        raise CursorTypeMismatch('Cursor key is not text')
    return value


def decode(token: str, ranking: Ranking, direction: Direction) -> CursorPosition:
    """Decode ``token`` for use under ``ranking`` in ``direction``.

    Raises `CursorMalformed` when the token cannot be read at all, and
    `CursorTypeMismatch` when it reads fine but was issued for a different
    kind of sort or the opposite direction.
    """
    sort_name, issued_direction, kind, value, record_id = _load(token)
    if sort_name != ranking.name or kind is not ranking.kind:
        raise CursorTypeMismatch(
            f"Cursor was issued for sort '{sort_name}', not '{ranking.name}'"
        )
    if issued_direction is not Direction(direction):
        raise CursorTypeMismatch(
            f"Cursor was issued for order '{issued_direction.value}', not '{Direction(direction).value}'"
        )
    return CursorPosition(kind, _decode_key(kind, value), record_id)
