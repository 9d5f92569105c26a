class GameError(Exception):
    """Base class for room / game failures."""


class RoomNotFound(GameError):
    def __init__(self, room_id: str):
        super().__init__(f"room {room_id!r} not found")
        self.room_id = room_id


class InvalidState(GameError):
    """The room is not in a state that allows the requested transition."""
