from contextlib import contextmanager

from leaderboard import db


@contextmanager
def unit_of_work():
    """Commit everything done in the block, or roll all of it back on any error."""
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
