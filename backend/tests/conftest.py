import os
import sys
import pytest

# Ensure the backend root (containing the `sequence_memory` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sequence_memory import create_app, db, socketio
from sequence_memory.services.sequence import (
    MemoryStorage,
    RoundStateMachine,
    RoundTimer,
    SpeechAnnouncer,
    StatsStore,
    build_round_machine,
)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STATS_STORAGE_KEY = 'stats'
    DEFAULT_SEQUENCE_LENGTH = 5
    DEFAULT_MEMORIZE_SEC = 5
    DEFAULT_NUMBER_RANGE = 9
    DEFAULT_SPEECH_RATE = 1.0
    TIMER_INTERVAL_SEC = 0
    SPEECH_VOICE_LANG = 'en-US'


class DeferredSpawner:
    """Collects countdown workers so a test decides when they run."""

    def __init__(self):
        self.workers = []

    def __call__(self, target, *args):
        self.workers.append(lambda: target(*args))

    def run_all(self):
        while self.workers:
            self.workers.pop(0)()


class FixedSequenceGenerator:
    def __init__(self, values):
        self.values = tuple(values)

    def generate(self, length, exclusive_max):
        return self.values


class RecordingAnnouncer(SpeechAnnouncer):
    def __init__(self):
        self.calls = []

    def speak(self, text, rate, on_done):
        self.calls.append((text, rate, on_done))


@pytest.fixture()
def spawner():
    return DeferredSpawner()


@pytest.fixture()
def deferred_timer(spawner):
    return RoundTimer(spawn=spawner, sleep=lambda _seconds: None)


@pytest.fixture()
def announcer():
    return RecordingAnnouncer()


@pytest.fixture()
def machine(deferred_timer, announcer):
    stats = StatsStore(MemoryStorage())
    stats.load()
    return RoundStateMachine(
        generator=FixedSequenceGenerator([3, 1, 4, 1, 5]),
        timer=deferred_timer,
        stats=stats,
        announcer=announcer,
    )


@pytest.fixture()
def flask_app(deferred_timer):
    application = create_app(TestConfig)
    with application.app_context():
        import sequence_memory.models  # noqa: F401
        db.create_all()
        build_round_machine(
            application,
            generator=FixedSequenceGenerator([3, 1, 4, 1, 5]),
            timer=deferred_timer,
        )
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
