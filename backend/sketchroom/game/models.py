from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Literal


RoomPhase = Literal["lobby", "drawing", "resolving", "game_over"]


@dataclass
class Player:
    id: str
    username: str
    score: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "score": self.score}


@dataclass
class Room:
    id: str
    players: list[Player] = field(default_factory=list)
    current_drawer_id: str | None = None
    word: str | None = None
    is_playing: bool = False
    phase: RoomPhase = "lobby"
    round: int = 0
    max_rounds: int = 3
    time_left: int = 60
    scores: dict[str, int] = field(default_factory=dict)
    stroke_history: list[Any] = field(default_factory=list)
    correct_guessers: set[str] = field(default_factory=set)
    # Only one pending tick / grace callback per room.
    timer: Any = field(default=None, repr=False, compare=False)
    timer_token: int = 0
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def find_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def player_index(self, player_id: str | None) -> int:
        for idx, p in enumerate(self.players):
            if p.id == player_id:
                return idx
        return -1

    def players_payload(self) -> list[dict]:
        return [p.to_dict() for p in self.players]
