import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///leaderboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # API key auth: either the plain key (hashed at startup) or a precomputed bcrypt hash
    API_KEY = os.environ.get('LEADERBOARD_API_KEY')
    API_KEY_HASH = os.environ.get('LEADERBOARD_API_KEY_HASH')
    API_KEY_HEADER = os.environ.get('LEADERBOARD_API_KEY_HEADER', 'X-API-Key')
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '8'))
    # Pagination
    MAX_PAGE_SIZE = int(os.environ.get('LEADERBOARD_MAX_PAGE_SIZE', '100'))
    DEFAULT_PAGE_SIZE = int(os.environ.get('LEADERBOARD_PAGE_SIZE', '25'))
    # Bounded retries for public game identifiers
    IDENTIFIER_MAX_ATTEMPTS = int(os.environ.get('IDENTIFIER_MAX_ATTEMPTS', '10'))
    # CSV seed imported by `flask seed-from-csv`
    SEED_FILE = os.environ.get('LEADERBOARD_SEED_FILE', '/data/seed.csv')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
