import os
import sys
import pytest

# Ensure the backend root (containing the `clubmate` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from clubmate import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PAIRING_STRATEGY = 'swiss'
    BYE_POINTS = 1.0
    MAX_TOTAL_ROUNDS = 100
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import clubmate.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database so several threads can share it."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'clubmate.db'}"

    application = create_app(FileConfig)
    with application.app_context():
        import clubmate.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def make_tournament(flask_app):
    """Build a tournament with ``players`` active players named P1..Pn."""
    from clubmate.services.tournaments import management

    counter = {'n': 0}

    def _make(players=4, total_rounds=3, name=None):
        counter['n'] += 1
        tournament = management.create_tournament(name or f'Open {counter["n"]}', total_rounds)
        roster = [management.add_player(tournament.id, f'P{i + 1}') for i in range(players)]
        return tournament, roster

    return _make


@pytest.fixture()
def play_round():
    """Submit a result for every pending match of a round: player1 wins unless told to draw."""
    from clubmate import repositories as stores
    from clubmate.services.tournaments.results import Outcome, submit_result

    def _play(round_, draws=()):
        for match in stores.matches.find_by_round(round_.id):
            if not match.is_pending:
                continue
            if match.id in draws:
                outcome = Outcome.draw()
            else:
                outcome = Outcome.player1_win(match.player1_id)
            submit_result(round_.tournament_id, match.id, outcome)

    return _play
