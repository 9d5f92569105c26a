from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from ..realtime import events
from ..realtime.channel import EventChannel
from ..realtime.scheduler import Scheduler
from .errors import InvalidState, RoomNotFound
from .models import Player, Room
from .registry import RoomRegistry
from .words import WordSource


logger = logging.getLogger(__name__)


class RoomService:
    """Turn, round, timer and score logic for every room.

    Every public method runs to completion under the room's lock, and every
    scheduled callback re-checks that its room is still registered and that
    its timer token is still current before touching anything.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        channel: EventChannel,
        scheduler: Scheduler,
        words: WordSource | None = None,
        round_duration_sec: int = 60,
        grace_sec: float = 5,
        empty_room_ttl_sec: float = 0,
        max_stroke_history: int = 5000,
        score_repeat_guesses: bool = True,
    ):
        self.registry = registry
        self.channel = channel
        self.scheduler = scheduler
        self.words = words or WordSource()
        self.round_duration_sec = round_duration_sec
        self.grace_sec = grace_sec
        self.empty_room_ttl_sec = empty_room_ttl_sec
        self.max_stroke_history = max_stroke_history
        self.score_repeat_guesses = score_repeat_guesses

    @contextmanager
    def _locked(self, room_id: str) -> Iterator[Room | None]:
        room = self.registry.get_room(room_id)
        if room is None:
            yield None
            return
        with room.lock:
            yield room if self.registry.holds(room) else None

    # Rooms / players

    def create_room(self) -> str:
        room = self.registry.create_room()
        if self.empty_room_ttl_sec > 0:
            self.scheduler.call_later(self.empty_room_ttl_sec, self._expire_if_unused, room)
        return room.id

    def _expire_if_unused(self, room: Room) -> None:
        with room.lock:
            if self.registry.holds(room) and not room.players:
                logger.info("room %s never joined, expiring", room.id)
                self.registry.remove_room(room.id)

    def join(self, room_id: str, identity: str, username: str) -> Player:
        with self._locked(room_id) as room:
            if room is None:
                raise RoomNotFound(room_id)

            # Rejoin by the same connection keeps its entry and score.
            player = room.find_player(identity)
            if player is None:
                player = Player(id=identity, username=username)
                room.players.append(player)
                room.scores[identity] = 0
            else:
                player.username = username

            self.channel.join_group(identity, room.id)
            self.channel.broadcast(room.id, events.PLAYER_JOINED, {"players": room.players_payload()})
            logger.info("%s (%s) joined room %s", username, identity, room.id)
            return player

    def leave(self, room_id: str, identity: str) -> bool:
        with self._locked(room_id) as room:
            if room is None:
                return False
            idx = room.player_index(identity)
            if idx < 0:
                return False

            room.players.pop(idx)
            room.scores.pop(identity, None)
            room.correct_guessers.discard(identity)
            self.channel.leave_group(identity, room.id)

            if not room.players:
                self.registry.remove_room(room.id)
                return True

            if room.current_drawer_id == identity:
                room.current_drawer_id = None
                self._end_round(room)

            self.channel.broadcast(
                room.id,
                events.PLAYER_LEFT,
                {"playerId": identity, "players": room.players_payload()},
            )
            logger.info("%s left room %s", identity, room.id)
            return True

    def snapshot(self, room_id: str, viewer_id: str | None = None) -> dict | None:
        with self._locked(room_id) as room:
            if room is None:
                return None
            payload = {
                "id": room.id,
                "state": room.phase,
                "players": room.players_payload(),
                "isPlaying": room.is_playing,
                "currentDrawer": room.current_drawer_id,
                "round": room.round,
                "maxRounds": room.max_rounds,
                "timeLeft": room.time_left,
                "scores": dict(room.scores),
                "strokeHistory": list(room.stroke_history),
            }
            if viewer_id and viewer_id == room.current_drawer_id and room.word:
                payload["word"] = room.word
            return payload

    # Game flow

    def start_game(self, room_id: str) -> None:
        with self._locked(room_id) as room:
            if room is None:
                return
            if room.is_playing:
                logger.debug("start ignored, room %s already playing", room.id)
                return
            if not room.players:
                raise InvalidState(f"room {room.id} has no players")

            room.is_playing = True
            room.round = 1
            for p in room.players:
                p.score = 0
                room.scores[p.id] = 0
            room.current_drawer_id = room.players[0].id
            room.stroke_history = []

            logger.info("game started in room %s with %d players", room.id, len(room.players))
            self._begin_round(room, events.GAME_STARTED)

    def end_round(self, room_id: str) -> None:
        with self._locked(room_id) as room:
            if room is not None:
                self._end_round(room)

    def submit_stroke(self, room_id: str, identity: str, segment: Any) -> bool:
        with self._locked(room_id) as room:
            if room is None or identity != room.current_drawer_id:
                return False
            room.stroke_history.append(segment)
            if len(room.stroke_history) > self.max_stroke_history:
                del room.stroke_history[: -self.max_stroke_history]
            self.channel.broadcast(room.id, events.DRAW, segment, exclude=identity)
            return True

    def clear_canvas(self, room_id: str, identity: str) -> bool:
        with self._locked(room_id) as room:
            if room is None or identity != room.current_drawer_id:
                return False
            room.stroke_history = []
            self.channel.broadcast(room.id, events.CLEAR_CANVAS, exclude=identity)
            return True

    def submit_guess(self, room_id: str, identity: str, text: str) -> None:
        with self._locked(room_id) as room:
            if room is None:
                return
            player = room.find_player(identity)
            if player is None:
                return

            if (
                room.phase == "drawing"
                and identity != room.current_drawer_id
                and room.word
                and text.lower() == room.word.lower()
            ):
                self._award_guess(room, player)
                return

            self.channel.broadcast(
                room.id,
                events.CHAT_MESSAGE,
                {"senderId": identity, "username": player.username, "message": text},
            )

    def _award_guess(self, room: Room, player: Player) -> None:
        if player.id in room.correct_guessers and not self.score_repeat_guesses:
            logger.debug("repeat guess by %s in room %s ignored", player.id, room.id)
            return
        room.correct_guessers.add(player.id)

        points = math.ceil(room.time_left / 2)
        room.scores[player.id] = room.scores.get(player.id, 0) + points
        player.score = room.scores[player.id]

        self.channel.broadcast(
            room.id,
            events.CORRECT_GUESS,
            {
                "playerId": player.id,
                "username": player.username,
                "scores": dict(room.scores),
                "players": room.players_payload(),
            },
        )

        non_drawers = [p for p in room.players if p.id != room.current_drawer_id]
        if all(room.scores.get(p.id, 0) > 0 for p in non_drawers):
            self._end_round(room)

    # Rounds and timers (room lock held)

    def _begin_round(self, room: Room, event: str) -> None:
        room.phase = "drawing"
        room.word = self.words.next_word()
        room.time_left = self.round_duration_sec
        room.correct_guessers = set()

        self.channel.broadcast(
            room.id,
            event,
            {"currentDrawer": room.current_drawer_id, "round": room.round, "maxRounds": room.max_rounds},
        )
        self.channel.unicast(room.current_drawer_id, events.WORD_TO_DRAW, room.word)
        logger.debug("room %s round %d word %r", room.id, room.round, room.word)
        self._arm(room, 1, self._tick)

    def _end_round(self, room: Room) -> None:
        if room.phase != "drawing":
            return
        room.phase = "resolving"

        self.channel.broadcast(
            room.id,
            events.ROUND_END,
            {"word": room.word, "scores": dict(room.scores), "players": room.players_payload()},
        )
        room.stroke_history = []
        self.channel.broadcast(room.id, events.CLEAR_CANVAS)

        logger.info("room %s round %d/%d ended", room.id, room.round, room.max_rounds)
        self._arm(room, self.grace_sec, self._after_grace)

    def _end_game(self, room: Room) -> None:
        self._disarm(room)
        room.is_playing = False
        room.phase = "game_over"
        room.word = None
        room.current_drawer_id = None

        standings = sorted(room.players, key=lambda p: room.scores.get(p.id, 0), reverse=True)
        self.channel.broadcast(
            room.id,
            events.GAME_END,
            {"players": [p.to_dict() for p in standings], "scores": dict(room.scores)},
        )
        logger.info("game over in room %s", room.id)

    def _tick(self, room: Room, token: int) -> None:
        with room.lock:
            if not self._is_current(room, token):
                return
            room.timer = None
            room.time_left -= 1
            self.channel.broadcast(room.id, events.TIME_UPDATE, room.time_left)

            if room.time_left <= 0:
                self._end_round(room)
            else:
                self._arm(room, 1, self._tick)

    def _after_grace(self, room: Room, token: int) -> None:
        with room.lock:
            if not self._is_current(room, token):
                return
            room.timer = None

            if room.round >= room.max_rounds:
                self._end_game(room)
                return

            room.round += 1
            idx = room.player_index(room.current_drawer_id)
            room.current_drawer_id = room.players[(idx + 1) % len(room.players)].id
            self._begin_round(room, events.NEW_ROUND)

    def _arm(self, room: Room, delay: float, callback: Callable[[Room, int], None]) -> None:
        self._disarm(room)
        room.timer_token += 1
        room.timer = self.scheduler.call_later(delay, callback, room, room.timer_token)

    def _disarm(self, room: Room) -> None:
        if room.timer is not None:
            room.timer.cancel()
            room.timer = None

    def _is_current(self, room: Room, token: int) -> bool:
        return self.registry.holds(room) and room.timer_token == token
