import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `wordbomb` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordbomb import create_app, socketio
from wordbomb.services.game import GameCoordinator
from wordbomb.services.game.combinations import CombinationGenerator
from wordbomb.services.game.lexicon import Lexicon


WORDS = ['برتقال', 'برج', 'برد', 'برق', 'بركة', 'برية', 'كتاب', 'سمك']


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    MAX_PLAYERS = 8
    MIN_PLAYERS = 2
    INITIAL_LIVES = 3
    INITIAL_TIMER_SEC = 10
    MIN_TIMER_SEC = 5
    TIMER_STEP_WORDS = 5
    MIN_WORD_LENGTH = 0
    TICK_INTERVAL_SEC = 1.0


class RecordingGateway:
    """Stands in for the Socket.IO gateway and keeps every notification."""

    def __init__(self):
        self.events = []
        self.subscriptions = defaultdict(set)

    def subscribe(self, connection_id, code):
        self.subscriptions[code].add(connection_id)

    def unsubscribe(self, connection_id, code):
        self.subscriptions[code].discard(connection_id)

    def to_room(self, code, event, payload):
        self.events.append(('room', code, event, payload))

    def to_connection(self, connection_id, event, payload):
        self.events.append(('conn', connection_id, event, payload))

    def names(self):
        return [e[2] for e in self.events]

    def payloads(self, event):
        return [e[3] for e in self.events if e[2] == event]

    def last(self, event):
        found = self.payloads(event)
        return found[-1] if found else None

    def clear(self):
        self.events.clear()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def coordinator(gateway):
    return GameCoordinator(
        gateway,
        lexicon=Lexicon(WORDS),
        combinations=CombinationGenerator(['بر']),
        autostart_countdown=False,
    )


@pytest.fixture()
def lobby(coordinator):
    """A room with players A, B and C; A is host. Returns the room code."""
    room = coordinator.create_room('sid-a')
    for sid, name in (('sid-a', 'A'), ('sid-b', 'B'), ('sid-c', 'C')):
        coordinator.join_room(sid, room.code, name)
    return room.code


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        test_client.get_received()
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
