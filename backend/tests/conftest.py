import os
import sys
import pytest

# Ensure the backend root (containing the `dartscore` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from dartscore import create_app, socketio
from dartscore import registry
from dartscore.models import GameConfig
from dartscore.services.games import engine


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    DEFAULT_START_SCORE = 501
    DEFAULT_IN_MODE = 'open'
    DEFAULT_OUT_MODE = 'double'
    MAX_UNDOS = 3
    INTRO_DURATION_SEC = 0
    TURN_CHANGE_DELAY_MS = 0
    ACHIEVEMENT_DISPLAY_MS = 0
    CHECKOUT_MAX_SCORE = 149
    CONTROLLER_DEBOUNCE_MS = 0
    TIMER_HEARTBEAT_SEC = 0
    MATCH_TTL_SEC = 0


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    registry.clear()


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


def play(state, *events):
    """Feed events through the reducer; returns the final state and all output events."""
    emitted = []
    for event in events:
        state, out = engine.reduce(state, event)
        emitted.extend(out)
    return state, emitted


def hit(segment):
    """Throw event for a label like 'T20', 'S5', 'D16', 'BULL', 'DBULL' or 'MISS'."""
    if segment == 'BULL':
        return engine.Throw('BULL', 25, 1)
    if segment == 'DBULL':
        return engine.Throw('DBL_BULL', 25, 2)
    if segment == 'MISS':
        return engine.Throw('MISS', 0, 0)
    kind = {'S': 'SINGLE_INNER', 'D': 'DOUBLE', 'T': 'TRIPLE'}[segment[0]]
    mult = {'S': 1, 'D': 2, 'T': 3}[segment[0]]
    return engine.Throw(kind, int(segment[1:]), mult)


@pytest.fixture()
def make_state():
    def _make(start_score=501, in_mode='open', out_mode='double', split_bull=False,
              starting_player='p1', started=True, max_undos=3):
        state = engine.new_match(
            GameConfig(start_score=start_score, in_mode=in_mode, out_mode=out_mode, split_bull=split_bull),
            starting_player=starting_player,
            max_undos=max_undos,
        )
        if started:
            state, _ = engine.reduce(state, engine.IntroComplete())
        return state
    return _make
