from flask import current_app, request
from flask_socketio import close_room, emit, join_room
from xox import socketio
from xox.errors import IllegalMove, NotFound, RoomError
from xox.services.games.coordinator import RoomCoordinator

NAMESPACE = '/ws'
MAX_NAME_LENGTH = 32
DEFAULT_NAME = 'Anonymous'


def channel_for(room_code: str) -> str:
    return f"room:{room_code}"


def get_coordinator(app=None) -> RoomCoordinator:
    return (app or current_app).extensions['xox.coordinator']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _emit_error(exc: RoomError) -> None:
    # Errors only ever go back to the connection that caused them
    emit('error', exc.to_dict())


# ---- payload parsing ----

def _field(data, key):
    return data.get(key) if isinstance(data, dict) else None


def _room_code(data) -> str:
    code = _field(data, 'room_code')
    if not code:
        raise NotFound('room_code is required')
    return code


def _player_name(data) -> str:
    name = _field(data, 'player_name')
    if not isinstance(name, str) or not name.strip():
        return DEFAULT_NAME
    return name.strip()[:MAX_NAME_LENGTH]


def _move_index(data):
    index = _field(data, 'index')
    if isinstance(index, bool) or not isinstance(index, int):
        raise IllegalMove('index must be an integer')
    return index


# ---- handlers ----

def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_create_room(data=None):
    sid = _get_sid()
    try:
        result = get_coordinator().create_room(_room_code(data), _player_name(data), sid)
    except RoomError as exc:
        _emit_error(exc)
        return
    join_room(channel_for(result.code))
    emit('room_created', {'marker': result.marker, 'room': result.room})
    current_app.logger.info(f"[room-create] room={result.code} sid={sid}")


def handle_join_room(data=None):
    sid = _get_sid()
    try:
        result = get_coordinator().join_room(_room_code(data), _player_name(data), sid)
    except RoomError as exc:
        _emit_error(exc)
        return
    channel = channel_for(result.code)
    join_room(channel)
    emit('room_joined', {'room': result.room}, to=channel)
    for conn_id, marker in result.assignments.items():
        emit('player_assigned', {'marker': marker}, to=conn_id)
    current_app.logger.info(f"[room-join] room={result.code} sid={sid}")


def handle_make_move(data=None):
    try:
        index = _move_index(data)
        result = get_coordinator().apply_move(_get_sid(), index)
    except RoomError as exc:
        _emit_error(exc)
        return
    emit('room_updated', {'room': result.room}, to=channel_for(result.code))
    current_app.logger.info(
        f"[room-move] room={result.code} marker={result.marker} index={index} status={result.room['status']}"
    )


def handle_reset_room(data=None):
    try:
        result = get_coordinator().reset_room(_get_sid())
    except RoomError as exc:
        _emit_error(exc)
        return
    emit('room_reset', {'room': result.room}, to=channel_for(result.code))
    current_app.logger.info(f"[room-reset] room={result.code}")


def handle_get_room_state(data=None):
    try:
        result = get_coordinator().get_state(_room_code(data))
    except RoomError as exc:
        _emit_error(exc)
        return
    emit('room_state', {'room': result.room})


def handle_disconnect(reason=None):
    sid = _get_sid()
    result = get_coordinator().disconnect(sid)
    if result is None:
        return
    channel = channel_for(result.code)
    emit('player_disconnected', {'room': result.room, 'removed': result.removed},
         to=channel, include_self=False)
    if result.removed:
        close_room(channel)
    current_app.logger.info(f"[room-leave] room={result.code} sid={sid} removed={result.removed}")


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create_room', handle_create_room, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('make_move', handle_make_move, namespace=namespace)
    socketio.on_event('reset_room', handle_reset_room, namespace=namespace)
    socketio.on_event('get_room_state', handle_get_room_state, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
