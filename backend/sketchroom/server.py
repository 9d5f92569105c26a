from __future__ import annotations

import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.registry import RoomRegistry
from .game.service import RoomService
from .game.words import WordSource
from .realtime.channel import SocketIOChannel
from .realtime.handlers import register_socketio_handlers
from .realtime.scheduler import Scheduler, SocketIOScheduler
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp


def _async_mode(configured: str) -> str:
    if configured:
        return configured
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, scheduler: Scheduler | None = None) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    registry = RoomRegistry(
        max_rounds=app.config.get("MAX_ROUNDS", 3),
        round_duration_sec=app.config.get("ROUND_DURATION_SEC", 60),
        id_length=app.config.get("ROOM_ID_LENGTH", 6),
    )
    service = RoomService(
        registry,
        SocketIOChannel(socketio),
        scheduler or SocketIOScheduler(socketio),
        words=WordSource(app.config.get("WORDS")),
        round_duration_sec=app.config.get("ROUND_DURATION_SEC", 60),
        grace_sec=app.config.get("ROUND_GRACE_SEC", 5),
        empty_room_ttl_sec=app.config.get("EMPTY_ROOM_TTL_SEC", 0),
        max_stroke_history=app.config.get("MAX_STROKE_HISTORY", 5000),
        score_repeat_guesses=app.config.get("SCORE_REPEAT_GUESSES", True),
    )
    app.extensions["sketchroom"] = service

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, service)

    return app, socketio
