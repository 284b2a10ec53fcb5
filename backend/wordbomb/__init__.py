from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from wordbomb.main import main
    flask_app.register_blueprint(main)

    # The coordinator owns every live room of this app instance
    flask_app.extensions['wordbomb'] = build_coordinator(flask_app)

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from wordbomb.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app


def build_coordinator(flask_app):
    from wordbomb.models import RoomSettings
    from wordbomb.services.game import GameCoordinator
    from wordbomb.services.game.broadcast import BroadcastGateway
    from wordbomb.services.game.lexicon import Lexicon

    config = flask_app.config
    lexicon_path = config.get('LEXICON_PATH')
    lexicon = Lexicon.from_file(lexicon_path) if lexicon_path else Lexicon.default()
    flask_app.logger.info(f"[lexicon] loaded {len(lexicon)} words from {lexicon_path or 'bundled list'}")

    # Tests drive the clock by hand unless asked otherwise
    autostart = not config.get('TESTING') or bool(config.get('ENABLE_COUNTDOWN_IN_TESTS'))
    return GameCoordinator(
        BroadcastGateway(socketio),
        lexicon=lexicon,
        settings=RoomSettings.from_config(config),
        tick_interval=float(config.get('TICK_INTERVAL_SEC', 1.0)),
        start_task=socketio.start_background_task,
        sleep=socketio.sleep,
        autostart_countdown=autostart,
        logger=flask_app.logger,
    )
