from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from clubmate.api.tournaments import tournaments
    from clubmate.api.rounds import rounds
    from clubmate.api.admin import admin
    flask_app.register_blueprint(tournaments, url_prefix='/api/tournaments')
    flask_app.register_blueprint(rounds, url_prefix='/api/tournaments')
    flask_app.register_blueprint(admin, url_prefix='/api/admin/tournaments')

    from clubmate.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from clubmate.errors import ClubmateError, InvariantViolation

    @flask_app.errorhandler(ClubmateError)
    def handle_clubmate_error(exc):
        if isinstance(exc, InvariantViolation):
            flask_app.logger.error(f"[invariant] {exc.message} details={exc.details}")
        else:
            flask_app.logger.info(f"[rejected] kind={exc.kind} {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @click.command('db-reset')
    @click.option('--players', default=6, show_default=True, help='Players to seed into the demo tournament.')
    @click.option('--rounds', 'total_rounds', default=5, show_default=True, help='Rounds in the demo tournament.')
    def db_reset_command(players, total_rounds):
        """Drops, recreates, and seeds the database."""
        from clubmate.services.tournaments import management
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            tournament = management.create_tournament('Club Championship', total_rounds)
            for i in range(players):
                management.add_player(tournament.id, f'Player {i + 1}')

            click.echo(f'Database has been reset and seeded with {players} players!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
