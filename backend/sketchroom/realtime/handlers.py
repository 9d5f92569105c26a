from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit

from ..game.errors import InvalidState, RoomNotFound
from ..game.service import RoomService
from . import events


logger = logging.getLogger(__name__)


def _room_id(data: Any) -> str:
    # Some events send the bare room id, others wrap it in {"roomId": ...}.
    if isinstance(data, dict):
        data = data.get("roomId", "")
    if data is None:
        return ""
    return str(data).strip()


def _first(payload: dict, *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 24:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def register_socketio_handlers(socketio: SocketIO, service: RoomService) -> None:
    @socketio.on(events.CREATE_ROOM)
    def create_room(*_args):
        return service.create_room()

    @socketio.on(events.JOIN_ROOM)
    def join_room(data):
        payload = data if isinstance(data, dict) else {}
        room_id = _room_id(payload)
        name = str(_first(payload, "username", "displayName") or "").strip()

        if not room_id or not _validate_name(name):
            return {"success": False, "message": "Invalid room or name"}

        try:
            service.join(room_id, request.sid, name)
        except RoomNotFound:
            logger.info("join rejected, room %s not found", room_id)
            return {"success": False, "message": "Room not found"}

        return {"success": True, "room": service.snapshot(room_id, viewer_id=request.sid)}

    @socketio.on(events.LEAVE_ROOM)
    def leave_room(data):
        room_id = _room_id(data)
        if not room_id:
            return {"success": False}
        return {"success": service.leave(room_id, request.sid)}

    @socketio.on(events.START_GAME)
    def start_game(data):
        room_id = _room_id(data)
        if not room_id:
            return

        try:
            service.start_game(room_id)
        except InvalidState as exc:
            logger.warning("start-game from %s ignored: %s", request.sid, exc)

    @socketio.on(events.DRAW)
    def draw(data):
        if not isinstance(data, dict):
            return
        room_id = _room_id(data)
        segment = _first(data, "line", "strokeSegment")
        if not room_id or segment is None:
            return

        service.submit_stroke(room_id, request.sid, segment)

    @socketio.on(events.CLEAR_CANVAS)
    def clear_canvas(data):
        room_id = _room_id(data)
        if not room_id:
            return

        service.clear_canvas(room_id, request.sid)

    @socketio.on(events.CHAT_MESSAGE)
    def chat_message(data):
        if not isinstance(data, dict):
            return
        room_id = _room_id(data)
        text = _first(data, "message", "text")
        if not room_id or not isinstance(text, str) or not text.strip():
            return

        service.submit_guess(room_id, request.sid, text)

    @socketio.on(events.REQUEST_ROOM_DATA)
    def request_room_data(data):
        snapshot = service.snapshot(_room_id(data), viewer_id=request.sid)
        if snapshot is None:
            emit(events.ROOM_DATA, {"error": "Room not found"})
            return
        emit(events.ROOM_DATA, snapshot)

    @socketio.on("disconnect")
    def on_disconnect(*_args):
        # Linear scan; leave() checks membership under the room lock.
        sid = request.sid
        for room in service.registry.list_rooms():
            service.leave(room.id, sid)
        logger.debug("connection %s closed", sid)
