import os
import sys
import pytest

# Ensure the backend root (containing the `hunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from flask import Flask
from flask_bcrypt import Bcrypt

from hunt import create_app, socketio
from hunt.services import SessionCoordinator

NAMESPACE = '/ws'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = NAMESPACE
    GAME_CODE_LENGTH = 4
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = 'DEBUG'


QUESTIONS = [
    {'questionText': 'Find a red door', 'category': 'Town', 'expectedAnswer': 'photo of a red door'},
    {'questionText': 'Who built the bridge?', 'category': 'History', 'expectedAnswer': 'Brunel',
     'imageUrl': 'file:///bridge.jpg', 'caption': 'The old bridge'},
]


class RecordingTransport:
    """Collects outbound events instead of sending them."""

    def __init__(self):
        self.sent = []

    def send(self, event, payload, to):
        self.sent.append((event, payload, to))

    def events(self, name, to=None):
        return [p for e, p, t in self.sent if e == name and (to is None or t == to)]

    def recipients(self, name):
        return [t for e, _, t in self.sent if e == name]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def coordinator(transport):
    hashing_app = Flask(__name__)
    hashing_app.config['BCRYPT_LOG_ROUNDS'] = 4
    hasher = Bcrypt(hashing_app)
    return SessionCoordinator(transport, hasher=hasher)


@pytest.fixture()
def game(coordinator, transport):
    """A waiting session organized by connection 'org'."""
    code = coordinator.create_session('org', 3, 'Bristol', QUESTIONS)['gameKey']
    transport.clear()
    return code


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=NAMESPACE,
        )
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected(NAMESPACE):
                test_client.disconnect(namespace=NAMESPACE)
        except Exception:
            pass
