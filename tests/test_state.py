"""Tests for game state."""

import pickle
import zlib

import pytest

from grue.engine.lighting import AlwaysLit, LightSystem
from grue.engine.state import START_ROOM, GameState, new_game_state
from grue.engine.world import PLAYER, World


def test_new_game_state(world: World):
    """Fresh game state starts outside the house, lit."""
    state = new_game_state(world)
    assert state.current_room_id == START_ROOM
    assert state.moves == 0
    assert state.score == 0
    assert START_ROOM in state.visited_rooms
    assert not state.is_dark
    assert not state.is_finished
    assert isinstance(world.lighting, LightSystem)


def test_new_game_state_unknown_room(world: World):
    with pytest.raises(ValueError):
        new_game_state(world, start_room="NOWHERE")


def test_new_game_state_keeps_lighting(small_world: World):
    new_game_state(small_world, start_room="CAVE", use_light_system=False)
    assert isinstance(small_world.lighting, AlwaysLit)


def test_new_game_state_in_dark_room(small_world: World):
    state = new_game_state(small_world, start_room="CAVE")
    assert state.is_dark


def test_flags():
    state = GameState()
    assert state.get_flag("troll_dead") is None
    assert state.get_flag("troll_dead", False) is False
    state.set_flag("troll_dead")
    assert state.get_flag("troll_dead") is True


@pytest.mark.parametrize("attr", ["has_won", "is_dead", "has_quit"])
def test_is_finished(attr):
    state = GameState()
    setattr(state, attr, True)
    assert state.is_finished


def test_pickle_roundtrip(world: World):
    """World and GameState survive a pickle/unpickle cycle together."""
    state = new_game_state(world)
    state.current_room_id = "LIVING-ROOM"
    state.moves = 42
    state.visited_rooms.add("LIVING-ROOM")
    world.move_object("LAMP", PLAYER)

    blob = zlib.compress(pickle.dumps((world, state)))
    restored_world, restored = pickle.loads(zlib.decompress(blob))

    assert restored.current_room_id == "LIVING-ROOM"
    assert restored.moves == 42
    assert "LIVING-ROOM" in restored.visited_rooms
    assert restored_world.player_inventory.contains("LAMP")
    assert restored_world.get_object("LAMP").location_id == PLAYER
    # Lighting follows the restored state
    assert restored_world.lighting.state is restored
