from flask import Blueprint, jsonify
from xox.errors import RoomError
from xox.socketio_events import get_coordinator

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room_state(room_code):
    """
    Returns the current snapshot of a room, for clients that are not
    connected over the socket yet.
    """
    try:
        result = get_coordinator().get_state(room_code)
    except RoomError as exc:
        return jsonify({'error': exc.message, 'kind': exc.kind}), 404
    return jsonify(result.room), 200
