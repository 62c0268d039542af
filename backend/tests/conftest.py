import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    HOLES_PER_MATCH = 18
    CORS_ORIGINS = ['http://localhost:5173']
    ADMIN_USERNAME = 'superadmin'
    ADMIN_PASSCODE = '1111'
    DEFAULT_TOURNAMENT_NAME = 'Test Cup'


ADMIN_PASSCODE = '2468'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
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
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


# ---- Data builders ----

@pytest.fixture()
def teams(flask_app):
    from scoreboard.models import Team
    aviators = Team(name='The Aviators', short_name='aviators', color_code='#004A7F')
    producers = Team(name='The Producers', short_name='producers', color_code='#800000')
    db.session.add_all([aviators, producers])
    db.session.commit()
    return {'aviators': aviators, 'producers': producers}


@pytest.fixture()
def tournament(flask_app):
    from scoreboard.models import Tournament
    t = Tournament(name='Test Cup 2025', year=2025, aviator_score=0.0, producer_score=0.0, is_active=True)
    db.session.add(t)
    db.session.commit()
    return t


@pytest.fixture()
def make_round(tournament):
    from scoreboard.models import Round

    def _make(name='Round 1', match_type='Singles', owner=None):
        r = Round(tournament_id=(owner or tournament).id, name=name, match_type=match_type,
                  aviator_score=0.0, producer_score=0.0, pending_aviator_score=0.0,
                  pending_producer_score=0.0, is_complete=False)
        db.session.add(r)
        db.session.commit()
        return r
    return _make


@pytest.fixture()
def make_player(teams):
    from scoreboard.models import Player

    def _make(name, team='aviators'):
        p = Player(name=name, team_id=teams[team].id, wins=0, losses=0, ties=0)
        db.session.add(p)
        db.session.commit()
        return p
    return _make


@pytest.fixture()
def singles_match(make_round, make_player):
    """One Singles match, Amelia (aviators) against Mel (producers)."""
    from scoreboard.services.scoring.roster import create_match

    def _make(round_=None, aviator=None, producer=None, name='Match 1'):
        round_ = round_ or make_round()
        aviator = aviator or make_player('Amelia', 'aviators')
        producer = producer or make_player('Mel', 'producers')
        return create_match(round_, name, [aviator.id], [producer.id])
    return _make


@pytest.fixture()
def admin_client(client, teams, tournament):
    from scoreboard.models import User
    admin = User(username='admin', is_admin=True, needs_password_change=False)
    admin.set_passcode(ADMIN_PASSCODE)
    db.session.add(admin)
    db.session.commit()
    res = client.post('/api/login', json={'username': 'admin', 'passcode': ADMIN_PASSCODE})
    assert res.status_code == 200
    return client


def play_holes(match_id, outcomes, start=1):
    """Enter hole scores producing the given outcomes ('A', 'P' or 'H')."""
    from scoreboard.services.scoring.score_entry import record_hole_score
    strokes = {'A': (3, 4), 'P': (5, 4), 'H': (4, 4)}
    entry = None
    for offset, outcome in enumerate(outcomes):
        aviator, producer = strokes[outcome]
        entry = record_hole_score(match_id, start + offset, aviator, producer)
    return entry
