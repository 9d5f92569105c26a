from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game.service import RoomService

bp = Blueprint("rooms", __name__)


def _service() -> RoomService:
    return current_app.extensions["sketchroom"]


@bp.post("/rooms")
def create_room():
    return jsonify({"roomId": _service().create_room()}), 201


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    snapshot = _service().snapshot(room_id)
    if snapshot is None:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(snapshot)
