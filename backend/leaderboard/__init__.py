from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
import sys
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    origins = flask_app.config.get('CORS_ORIGINS') or ['*']
    socket_origins = '*' if '*' in origins else origins

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=origins, expose_headers=['Content-Disposition'])
    socketio.init_app(flask_app, cors_allowed_origins=socket_origins)

    from leaderboard.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Registers the Flask-Login request loader as a side effect
    from leaderboard.auth import init_api_key
    init_api_key(flask_app)

    from leaderboard.main import main
    flask_app.register_blueprint(main)

    from leaderboard.api.games import games
    flask_app.register_blueprint(games, url_prefix='/games')

    from leaderboard.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/scores')

    from leaderboard.api.export import export
    flask_app.register_blueprint(export, url_prefix='/export')

    from leaderboard.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates every table."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('seed-from-csv')
    @click.argument('path', required=False)
    def seed_command(path):
        """Imports a CSV backup when the database holds no games."""
        from leaderboard.services.transfer import seed_from_csv
        with flask_app.app_context():
            report = seed_from_csv(path or flask_app.config['SEED_FILE'])
            if report.skipped:
                print(f'Seed skipped: {report.skipped}')
            else:
                print(f'Imported {report.games_created} games and {report.scores_created} scores '
                      f'({report.games_failed} games and {report.scores_failed} scores failed)')

    @click.command('export-csv')
    @click.argument('path', required=False)
    def export_command(path):
        """Writes the CSV backup to PATH, or stdout."""
        from leaderboard.services.transfer import write_csv
        with flask_app.app_context():
            if path:
                with open(path, 'w', newline='', encoding='utf-8') as handle:
                    count = write_csv(handle)
                print(f'Wrote {count} rows to {path}')
            else:
                write_csv(sys.stdout)

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_command)
    flask_app.cli.add_command(export_command)

    return flask_app
