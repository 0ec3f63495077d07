"""Tests for rooms, objects and flags."""

import pytest

from grue.engine.objects import Direction, GameObject, ObjectFlags, Room, RoomExit


def _lantern() -> GameObject:
    return GameObject(
        id="LAMP",
        name="brass lantern",
        synonyms={"lamp", "lantern"},
        adjectives={"brass"},
        flags=ObjectFlags.VISIBLE | ObjectFlags.TAKEABLE,
    )


@pytest.mark.parametrize(
    "token",
    ["brass lantern", "BRASS LANTERN", "lamp", "Lamp", "lantern", "brass lamp"],
)
def test_matches_name(token):
    assert _lantern().matches_name(token)


@pytest.mark.parametrize("token", ["sword", "rusty lamp", "", None, "brass"])
def test_matches_name_rejects(token):
    assert not _lantern().matches_name(token)


def test_matches_name_ignores_description():
    obj = _lantern()
    obj.description = "A shiny thing."
    assert not obj.matches_name("shiny")


def test_flag_helpers():
    obj = _lantern()
    assert obj.is_takeable and obj.is_visible
    assert not obj.is_open

    obj.set_flag(ObjectFlags.IS_OPEN)
    assert obj.is_open
    obj.clear_flag(ObjectFlags.IS_OPEN)
    assert not obj.is_open


def test_is_lit_needs_light_and_on():
    obj = _lantern()
    obj.set_flag(ObjectFlags.LIGHT)
    assert not obj.is_lit
    obj.set_flag(ObjectFlags.ON)
    assert obj.is_lit


def test_can_contain_boundary():
    box = GameObject(
        id="BOX",
        flags=ObjectFlags.CONTAINER | ObjectFlags.IS_OPEN,
        capacity=10,
    )
    item = GameObject(id="ITEM", size=4)
    assert box.can_contain(item, load=6)
    assert not box.can_contain(item, load=7)


def test_can_contain_requires_open_container():
    item = GameObject(id="ITEM", size=1)
    closed = GameObject(id="BOX", flags=ObjectFlags.CONTAINER, capacity=10)
    plain = GameObject(id="ROCK", flags=ObjectFlags.IS_OPEN, capacity=10)
    assert not closed.can_contain(item)
    assert not plain.can_contain(item)


def test_direction_from_word():
    assert Direction.from_word("n") is Direction.NORTH
    assert Direction.from_word("Southwest") is Direction.SOUTHWEST
    assert Direction.from_word("enter") is Direction.IN
    assert Direction.from_word("sideways") is None
    assert Direction.from_word(None) is None


def test_room_exits():
    room = Room(id="HALL")
    room.exits[Direction.EAST] = RoomExit(message="A wall blocks the way.")
    room.exits[Direction.WEST] = RoomExit(destination="KITCHEN")

    assert room.get_exit(Direction.EAST).is_blocked
    assert not room.get_exit(Direction.WEST).is_blocked
    assert room.get_exit(Direction.UP) is None
