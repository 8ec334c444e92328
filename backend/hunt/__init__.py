from flask import Flask
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

bcrypt = Bcrypt()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    bcrypt.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per application; handlers reach it through current_app
    from hunt.services import SessionCoordinator
    from hunt.services.broadcast import SocketIOTransport
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    flask_app.extensions['hunt'] = SessionCoordinator(
        SocketIOTransport(socketio, namespace),
        hasher=bcrypt,
        code_length=flask_app.config.get('GAME_CODE_LENGTH', 4),
    )

    from hunt.main import main
    flask_app.register_blueprint(main)

    from hunt.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from hunt.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    return flask_app
