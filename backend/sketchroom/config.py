import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    ROOM_ID_LENGTH = int(os.environ.get("ROOM_ID_LENGTH", "6"))
    EMPTY_ROOM_TTL_SEC = int(os.environ.get("EMPTY_ROOM_TTL_SEC", "300"))
    MAX_STROKE_HISTORY = int(os.environ.get("MAX_STROKE_HISTORY", "5000"))

    # Game
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "60"))
    ROUND_GRACE_SEC = int(os.environ.get("ROUND_GRACE_SEC", "5"))
    MAX_ROUNDS = int(os.environ.get("MAX_ROUNDS", "3"))
    SCORE_REPEAT_GUESSES = os.environ.get("SCORE_REPEAT_GUESSES", "1") == "1"

    # Comma separated vocabulary override; empty means the built-in list.
    WORDS = [w.strip() for w in os.environ.get("WORDS", "").split(",") if w.strip()] or None
