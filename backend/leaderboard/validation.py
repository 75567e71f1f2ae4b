"""Input checks shared by the blueprints, the seed importer and the services."""

import math
import string

from leaderboard.errors import InvalidParameter, ValidationError

IDENTIFIER_ALPHABET = string.digits + string.ascii_lowercase
IDENTIFIER_LENGTH = 6

GAME_NAME_MAX = 255
USER_NAME_MAX = 100
USER_ID_MAX = 255
SCORE_TEXT_MAX = 255


def normalize_hex_id(hex_id):
    """Lower-case a public game identifier and check its shape."""
    if not isinstance(hex_id, str) or len(hex_id) != IDENTIFIER_LENGTH:
        raise InvalidParameter(f'Game id must be exactly {IDENTIFIER_LENGTH} characters')
    normalized = hex_id.lower()
    if any(c not in IDENTIFIER_ALPHABET for c in normalized):
        raise InvalidParameter('Game id must contain only alphanumeric characters (0-9, a-z)')
    return normalized


def _required_text(value, label, max_len):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label} cannot be empty')
    if len(value) > max_len:
        raise ValidationError(f'{label} cannot exceed {max_len} characters')
    return value


def validate_game_name(name):
    return _required_text(name, 'Game name', GAME_NAME_MAX)


def validate_description(description):
    if description is not None and not isinstance(description, str):
        raise ValidationError('Description must be a string')
    return description


def validate_user_name(user_name):
    return _required_text(user_name, 'User name', USER_NAME_MAX)


def validate_user_id(user_id):
    return _required_text(user_id, 'User ID', USER_ID_MAX)


def validate_score_text(score):
    # Clients may send the display score as a bare number
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        score = str(score)
    if not isinstance(score, str):
        raise ValidationError('Score is required')
    if len(score) > SCORE_TEXT_MAX:
        raise ValidationError(f'Score cannot exceed {SCORE_TEXT_MAX} characters')
    return score


def validate_score_val(score_val):
    if score_val is None:
        return None
    if isinstance(score_val, bool) or not isinstance(score_val, (int, float)):
        raise ValidationError('score_val must be a number')
    score_val = float(score_val)
    if not math.isfinite(score_val):
        raise ValidationError('score_val must be finite')
    return score_val


def parse_score_val(score):
    """Numeric ranking value for a display score, 0.0 when it is not a finite number."""
    try:
        value = float(score.strip())
    except (TypeError, ValueError, AttributeError):
        return 0.0
    return value if math.isfinite(value) else 0.0
