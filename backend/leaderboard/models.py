from leaderboard import db
from sqlalchemy.orm import validates
from datetime import datetime, timezone


def utcnow():
    """Naive UTC now; all timestamps are stored without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.isoformat() + 'Z'


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    hex_id = db.Column(db.String(6), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)
    scores = db.relationship('Score', back_populates='game', lazy='dynamic')

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def to_dict(self):
        return {
            'id': self.id,
            'hex_id': self.hex_id,
            'name': self.name,
            'description': self.description,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
            'deleted_at': isoformat(self.deleted_at),
        }


class Score(db.Model):
    __tablename__ = 'score'
    __table_args__ = (
        db.Index('ix_score_game_score_val', 'game_hex_id', 'score_val', 'id'),
        db.Index('ix_score_game_submitted_at', 'game_hex_id', 'submitted_at', 'id'),
        db.Index('ix_score_game_user_name_key', 'game_hex_id', 'user_name_key', 'id'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_hex_id = db.Column(db.String(6), db.ForeignKey('game.hex_id'), nullable=False)
    score = db.Column(db.String(255), nullable=False)
    score_val = db.Column(db.Float, nullable=False, default=0.0)
    user_name = db.Column(db.String(100), nullable=False)
    # Case-folded copy of user_name; the user_name sort and its index use this
    user_name_key = db.Column(db.String(300), nullable=False)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    extra = db.Column(db.JSON(none_as_null=True), nullable=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)
    game = db.relationship('Game', back_populates='scores')

    @validates('user_name')
    def _fold_user_name(self, key, value):
        self.user_name_key = fold_name(value)
        return value

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def to_dict(self):
        return {
            'id': self.id,
            'game_hex_id': self.game_hex_id,
            'score': self.score,
            'score_val': self.score_val,
            'user_name': self.user_name,
            'user_id': self.user_id,
            'extra': self.extra,
            'submitted_at': isoformat(self.submitted_at),
            'updated_at': isoformat(self.updated_at),
            'deleted_at': isoformat(self.deleted_at),
        }


def fold_name(value):
    return value.casefold() if value is not None else None
