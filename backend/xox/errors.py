class RoomError(Exception):
    """Base class for every failure a room operation can report.

    ``kind`` is the stable identifier sent to clients; the message is
    meant for humans.
    """

    kind = 'RoomError'
    default_message = 'Room operation failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]

    def to_dict(self):
        return {'kind': self.kind, 'message': self.message}


class AlreadyExists(RoomError):
    kind = 'AlreadyExists'
    default_message = 'Game already exists'


class NotFound(RoomError):
    kind = 'NotFound'
    default_message = 'Game not found'


class Full(RoomError):
    kind = 'Full'
    default_message = 'Game is full'


class AlreadyStarted(RoomError):
    kind = 'AlreadyStarted'
    default_message = 'Game already in progress'


class NotActive(RoomError):
    kind = 'NotActive'
    default_message = 'Game not in progress'


class NotAPlayer(RoomError):
    kind = 'NotAPlayer'
    default_message = 'You are not a player in this game'


class WrongTurn(RoomError):
    kind = 'WrongTurn'
    default_message = 'Not your turn'


class IllegalMove(RoomError):
    kind = 'IllegalMove'
    default_message = 'Invalid move'


class NotFinished(RoomError):
    kind = 'NotFinished'
    default_message = 'Game is not finished'


class AlreadyInRoom(RoomError):
    kind = 'AlreadyInRoom'
    default_message = 'You are already in a game'
