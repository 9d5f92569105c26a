import random
from itertools import cycle

import pytest

from sketchroom.game.registry import RoomRegistry
from sketchroom.game.words import DEFAULT_WORDS, WordSource


def test_word_source_picks_from_vocabulary():
    source = WordSource(["kite", "tree"], rng=random.Random(7))
    picks = {source.next_word() for _ in range(50)}
    assert picks <= {"kite", "tree"}
    assert all(picks)


def test_word_source_default_vocabulary():
    assert WordSource().next_word() in DEFAULT_WORDS


def test_word_source_rejects_empty_vocabulary():
    with pytest.raises(ValueError):
        WordSource(["", "  "])


def test_create_room_initial_state():
    registry = RoomRegistry(max_rounds=3, round_duration_sec=60)
    room = registry.create_room()
    assert len(room.id) == 6
    assert registry.get_room(room.id) is room
    assert room.players == []
    assert room.is_playing is False
    assert room.round == 0
    assert room.max_rounds == 3
    assert room.time_left == 60
    assert room.current_drawer_id is None


def test_create_room_avoids_live_ids():
    ids = cycle(["aaaaaa", "aaaaaa", "bbbbbb"])
    registry = RoomRegistry(id_factory=lambda _n: next(ids))
    first = registry.create_room()
    second = registry.create_room()
    assert first.id == "aaaaaa"
    assert second.id == "bbbbbb"
    assert len(registry) == 2


def test_remove_room_is_idempotent():
    registry = RoomRegistry()
    room = registry.create_room()
    assert registry.remove_room(room.id) is True
    assert registry.remove_room(room.id) is False
    assert registry.remove_room("missing") is False
    assert registry.get_room(room.id) is None
    assert not registry.holds(room)
