"""Tic-tac-toe room logic: board rules, the room coordinator and the reaper.

Nothing here knows about Socket.IO; handlers in ``xox.socketio_events``
turn coordinator results into broadcasts.
"""
