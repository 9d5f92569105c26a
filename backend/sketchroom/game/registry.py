from __future__ import annotations

import logging
import uuid
from threading import RLock
from typing import Callable

from .models import Room


logger = logging.getLogger(__name__)


def _short_id(length: int) -> str:
    return uuid.uuid4().hex[:length]


class RoomRegistry:
    """Owns every live room, keyed by room id."""

    def __init__(
        self,
        max_rounds: int = 3,
        round_duration_sec: int = 60,
        id_length: int = 6,
        id_factory: Callable[[int], str] | None = None,
    ):
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._max_rounds = max_rounds
        self._round_duration_sec = round_duration_sec
        self._id_length = id_length
        self._id_factory = id_factory or _short_id

    def create_room(self) -> Room:
        with self._lock:
            room_id = self._id_factory(self._id_length)
            while room_id in self._rooms:
                room_id = self._id_factory(self._id_length)

            room = Room(
                id=room_id,
                max_rounds=self._max_rounds,
                time_left=self._round_duration_sec,
            )
            self._rooms[room_id] = room
            logger.info("room created: %s", room_id)
            return room

    def get_room(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def holds(self, room: Room) -> bool:
        with self._lock:
            return self._rooms.get(room.id) is room

    def remove_room(self, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.pop(room_id, None)
        if room is None:
            return False
        if room.timer is not None:
            room.timer.cancel()
            room.timer = None
        logger.info("room removed: %s", room_id)
        return True

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
