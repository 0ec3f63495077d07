"""Tests for the JSON world loader."""

import json
from pathlib import Path

import pytest

from grue.engine.loader import WorldBuildError, load_world
from grue.engine.objects import Direction, ObjectFlags, RoomFlags
from grue.engine.world import World


def _write_world(path: Path, rooms: list, objects: list) -> Path:
    (path / "rooms.json").write_text(json.dumps({"rooms": rooms}))
    (path / "objects.json").write_text(json.dumps({"objects": objects}))
    return path


def test_loads_rooms(world: World):
    assert len(world.rooms) == 9
    room = world.get_room("WEST-OF-HOUSE")
    assert room.name == "West of House"
    assert room.has_flag(RoomFlags.LIGHT | RoomFlags.OUTSIDE)
    assert room.long_description.startswith(room.description)
    assert room.get_exit(Direction.NORTH).destination == "NORTH-OF-HOUSE"


def test_blocked_exit_and_door(world: World):
    west = world.get_room("WEST-OF-HOUSE").get_exit(Direction.EAST)
    assert west.is_blocked
    assert "boarded" in west.message

    window = world.get_room("BEHIND-HOUSE").get_exit(Direction.WEST)
    assert window.destination == "KITCHEN"
    assert window.door == "WINDOW"


def test_loads_objects(world: World):
    lamp = world.get_object("LAMP")
    assert lamp.name == "brass lantern"
    assert lamp.has_flag(ObjectFlags.TAKEABLE | ObjectFlags.LIGHT)
    assert lamp.size == 5
    assert lamp.location_id == "LIVING-ROOM"


def test_flag_names_are_normalized(world: World):
    table = world.get_object("KITCHEN-TABLE")
    assert table.is_open


def test_objects_are_placed(world: World):
    mailbox = world.get_object("MAILBOX")
    assert mailbox.contents == ["LEAFLET"]
    assert world.get_object("LEAFLET").location_id == "MAILBOX"
    assert world.get_room("WEST-OF-HOUSE").items == ["MAILBOX", "FRONT-DOOR"]
    assert world.get_object("WHITE-HOUSE").location_id is None


def test_loaded_world_is_consistent(world: World):
    assert world.validate() == []


def test_custom_data_dir(tmp_path: Path):
    _write_world(
        tmp_path,
        rooms=[{"id": "HALL", "name": "Hall", "flags": ["Light"]}],
        objects=[{"id": "COIN", "name": "gold coin", "location": "HALL"}],
    )
    world = load_world(tmp_path, max_weight=7)
    assert world.get_room("HALL").items == ["COIN"]
    assert world.player_inventory.max_weight == 7


def test_unknown_flag_is_skipped(tmp_path: Path):
    _write_world(
        tmp_path,
        rooms=[{"id": "HALL", "flags": ["Light", "Haunted"]}],
        objects=[],
    )
    world = load_world(tmp_path)
    assert world.get_room("HALL").flags == RoomFlags.LIGHT


def test_dangling_exit_fails(tmp_path: Path):
    _write_world(
        tmp_path,
        rooms=[{"id": "HALL", "exits": {"north": "NOWHERE"}}],
        objects=[],
    )
    with pytest.raises(WorldBuildError) as exc_info:
        load_world(tmp_path)
    assert any("NOWHERE" in p for p in exc_info.value.problems)


def test_unplaceable_object_fails(tmp_path: Path):
    _write_world(
        tmp_path,
        rooms=[{"id": "HALL"}],
        objects=[{"id": "COIN", "location": "VAULT"}],
    )
    with pytest.raises(WorldBuildError):
        load_world(tmp_path)
