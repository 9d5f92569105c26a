from __future__ import annotations

from typing import Any, Protocol

from flask_socketio import SocketIO


class EventChannel(Protocol):
    def join_group(self, identity: str, group: str) -> None: ...

    def leave_group(self, identity: str, group: str) -> None: ...

    def unicast(self, identity: str, event: str, payload: Any = None) -> None: ...

    def broadcast(self, group: str, event: str, payload: Any = None, exclude: str | None = None) -> None: ...


def _args(payload: Any) -> tuple:
    return () if payload is None else (payload,)


class SocketIOChannel:
    """EventChannel backed by Flask-SocketIO rooms.

    Socket.IO sids are the connection identities and Socket.IO rooms are the
    groups. Emits go through the server object so they work both inside a
    handler and from background tasks.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/"):
        self.socketio = socketio
        self.namespace = namespace

    def join_group(self, identity: str, group: str) -> None:
        self.socketio.server.enter_room(identity, group, namespace=self.namespace)

    def leave_group(self, identity: str, group: str) -> None:
        self.socketio.server.leave_room(identity, group, namespace=self.namespace)

    def unicast(self, identity: str, event: str, payload: Any = None) -> None:
        self.socketio.emit(event, *_args(payload), to=identity, namespace=self.namespace)

    def broadcast(self, group: str, event: str, payload: Any = None, exclude: str | None = None) -> None:
        self.socketio.emit(
            event,
            *_args(payload),
            to=group,
            skip_sid=exclude,
            namespace=self.namespace,
        )
