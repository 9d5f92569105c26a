from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)


class TimerHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class SocketIOScheduler:
    """Runs delayed callbacks as Socket.IO background tasks.

    Works under whatever async mode the server runs in (eventlet green
    threads or plain threads) because it only uses socketio.sleep and
    socketio.start_background_task.
    """

    def __init__(self, socketio: SocketIO):
        self.socketio = socketio

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle()
        self.socketio.start_background_task(self._run, handle, delay, callback, args)
        return handle

    def _run(self, handle: TimerHandle, delay: float, callback: Callable[..., Any], args: tuple) -> None:
        self.socketio.sleep(delay)
        if handle.cancelled:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("scheduled callback %r failed", callback)
