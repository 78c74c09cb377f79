import os


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Rooms older than this are evicted (seconds)
    ROOM_TTL_SEC = int(os.environ.get('ROOM_TTL_SEC', str(24 * 60 * 60)))
    # How often the reaper sweeps for expired rooms (seconds)
    REAPER_INTERVAL_SEC = int(os.environ.get('REAPER_INTERVAL_SEC', str(60 * 60)))
    ROOM_CODE_MAX_LENGTH = int(os.environ.get('ROOM_CODE_MAX_LENGTH', '12'))
    CORS_ORIGINS = _origins(os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3000,http://localhost:3001,http://127.0.0.1:3000,http://127.0.0.1:3001',
    ))
