from collections import namedtuple

import pytest

from sketchroom.game.registry import RoomRegistry
from sketchroom.game.service import RoomService
from sketchroom.game.words import WordSource
from sketchroom.realtime.scheduler import TimerHandle
from sketchroom.server import create_app


Sent = namedtuple("Sent", "kind target event payload exclude")


class ManualScheduler:
    """Deterministic clock: callbacks only run inside advance()."""

    def __init__(self):
        self.now = 0
        self._seq = 0
        self._pending = []

    def call_later(self, delay, callback, *args):
        handle = TimerHandle()
        self._seq += 1
        self._pending.append((self.now + delay, self._seq, handle, callback, args))
        return handle

    def live(self):
        return [p for p in self._pending if not p[2].cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [p for p in self._pending if p[0] <= target]
            if not due:
                break
            entry = min(due, key=lambda p: (p[0], p[1]))
            self._pending.remove(entry)
            self.now = entry[0]
            if not entry[2].cancelled:
                entry[3](*entry[4])
        self.now = target


class RecordingChannel:
    def __init__(self):
        self.sent = []
        self.groups = {}

    def join_group(self, identity, group):
        self.groups.setdefault(group, set()).add(identity)

    def leave_group(self, identity, group):
        self.groups.get(group, set()).discard(identity)

    def unicast(self, identity, event, payload=None):
        self.sent.append(Sent("unicast", identity, event, payload, None))

    def broadcast(self, group, event, payload=None, exclude=None):
        self.sent.append(Sent("broadcast", group, event, payload, exclude))

    def named(self, event):
        return [s for s in self.sent if s.event == event]

    def events(self):
        return [s.event for s in self.sent]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def channel():
    return RecordingChannel()


@pytest.fixture()
def make_service(scheduler, channel):
    def _make(max_rounds=3, words=("apple",), **kwargs):
        registry = RoomRegistry(max_rounds=max_rounds)
        return RoomService(registry, channel, scheduler, WordSource(list(words)), **kwargs)

    return _make


@pytest.fixture()
def service(make_service):
    return make_service()


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    ROOM_ID_LENGTH = 6
    EMPTY_ROOM_TTL_SEC = 0
    MAX_STROKE_HISTORY = 5000
    ROUND_DURATION_SEC = 60
    ROUND_GRACE_SEC = 5
    MAX_ROUNDS = 3
    SCORE_REPEAT_GUESSES = True
    WORDS = ["apple"]


@pytest.fixture()
def app_config():
    return TestConfig


@pytest.fixture()
def app_bundle(app_config, scheduler):
    app, socketio = create_app(app_config, scheduler=scheduler)
    return app, socketio


@pytest.fixture()
def flask_app(app_bundle):
    return app_bundle[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_bundle):
    app, socketio = app_bundle
    clients = []

    def _connect():
        test_client = socketio.test_client(app)
        clients.append(test_client)
        return test_client

    yield _connect

    for c in clients:
        if c.is_connected():
            c.disconnect()
