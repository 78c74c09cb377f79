from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app; it owns every room for this process
    from xox.services.games.coordinator import RoomCoordinator
    flask_app.extensions['xox.coordinator'] = RoomCoordinator(
        ttl_sec=flask_app.config.get('ROOM_TTL_SEC', 24 * 60 * 60),
        code_max_length=flask_app.config.get('ROOM_CODE_MAX_LENGTH', 12),
    )

    from xox.main import main
    flask_app.register_blueprint(main)

    from xox.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from xox.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from xox.services.games.reaper import start_reaper
    start_reaper(flask_app)

    return flask_app
