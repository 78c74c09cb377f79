from typing import List, Optional

from xox import socketio


def reap_expired_rooms(app, now: Optional[float] = None) -> List[str]:
    """Evict rooms past their TTL and tell anyone still connected."""
    from xox.socketio_events import NAMESPACE, channel_for, get_coordinator

    expired = get_coordinator(app).expire_rooms(now)
    for code in expired:
        channel = channel_for(code)
        socketio.emit('room_expired', {'room_code': code}, to=channel, namespace=NAMESPACE)
        socketio.close_room(channel, namespace=NAMESPACE)
    if expired:
        app.logger.info(f"[room-reap] removed={len(expired)} rooms={','.join(expired)}")
    return expired


def start_reaper(app):
    """Start the periodic sweep as a Socket.IO background task.

    - No-ops in TESTING mode unless ENABLE_REAPER_IN_TESTS is set
    - Sweeps every REAPER_INTERVAL_SEC seconds for the life of the process
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_REAPER_IN_TESTS'):
        return None

    interval = int(app.config.get('REAPER_INTERVAL_SEC', 3600))

    def _worker():
        while True:
            socketio.sleep(interval)
            try:
                reap_expired_rooms(app)
            except Exception:
                app.logger.exception("[room-reap] sweep failed")

    app.logger.info(f"[room-reap] started interval={interval}s")
    return socketio.start_background_task(_worker)
