"""Play the sample world from the field to the attic treasure.

Route:
  West of House: open mailbox, take leaflet, north, east
  Behind House: open window, west (through the window)
  Kitchen: west
  Living Room: take lamp, light it, open trap door, down
  Cellar: east
  Gallery: take painting and key, west, up
  Living Room: east, up
  Attic: unlock chest with key, open chest, take egg
"""

import pytest

from grue.engine.commands import DARKNESS_MESSAGE, Game
from grue.engine.objects import RoomFlags
from grue.engine.state import GameState, new_game_state
from grue.engine.world import PLAYER, World


@pytest.fixture
def game(world: World) -> Game:
    return Game(world, new_game_state(world))


def _run(game: Game, commands: list[str]) -> list[str]:
    """Run a list of commands and return all responses."""
    responses = []
    for cmd in commands:
        responses.append(game.play(cmd))
        assert not game.state.is_finished, f"Game ended after {cmd!r}"
    return responses


def _assert_at(state: GameState, room_id: str) -> None:
    assert state.current_room_id == room_id, (
        f"Expected {room_id}, at {state.current_room_id}"
    )


def test_full_walkthrough(game: Game):
    world, state = game.world, game.state

    responses = _run(game, ["open mailbox", "take leaflet", "read leaflet"])
    assert responses[0] == "Opening the small mailbox reveals the leaflet."
    assert responses[2].startswith("WELCOME TO GRUE!")

    _run(game, ["north", "east"])
    _assert_at(state, "BEHIND-HOUSE")

    responses = _run(game, ["west"])
    assert responses[0] == "The small window is closed."
    _run(game, ["open window", "west"])
    _assert_at(state, "KITCHEN")

    responses = _run(game, ["west", "take lamp", "light it", "open trap door"])
    _assert_at(state, "LIVING-ROOM")
    assert responses[2] == "The brass lantern is now on."

    responses = _run(game, ["down"])
    _assert_at(state, "CELLAR")
    assert responses[0].startswith("Cellar")
    assert not state.is_dark

    _run(game, ["east", "take painting", "take key"])
    _assert_at(state, "GALLERY")
    assert state.score == 10

    _run(game, ["west", "up", "east", "up"])
    _assert_at(state, "ATTIC")

    responses = _run(game, ["open chest"])
    assert responses[0] == "The wooden chest is locked."

    responses = _run(game, ["unlock chest with key", "open chest", "take egg"])
    assert responses[0] == "The wooden chest is now unlocked."
    assert responses[1] == "Opening the wooden chest reveals the jeweled egg."
    assert responses[2] == "Taken."

    for obj_id in ["LEAFLET", "LAMP", "PAINTING", "RUSTY-KEY", "EGG"]:
        assert world.get_object(obj_id).location_id == PLAYER
    assert state.score == 15
    assert game.play("score") == f"Your score is 15, in {state.moves} moves."


def test_cellar_is_dark_without_lamp(game: Game):
    _run(game, ["north", "east", "open window", "west", "west", "open trap door"])
    responses = _run(game, ["down"])
    _assert_at(game.state, "CELLAR")
    assert responses[0] == DARKNESS_MESSAGE
    assert game.state.is_dark

    # Nothing can be found in the dark
    responses = _run(game, ["take painting", "look"])
    assert "don't see" in responses[0]
    assert responses[1] == DARKNESS_MESSAGE


def test_scoring_only_once(game: Game):
    world, state = game.world, game.state
    state.current_room_id = "GALLERY"
    world.get_room("GALLERY").set_flag(RoomFlags.LIGHT)

    _run(game, ["take painting", "drop painting", "take painting"])
    assert state.score == 10


def test_boarded_door(game: Game):
    responses = _run(game, ["east", "open door"])
    assert responses[0] == "The door is boarded and you can't remove the boards."
    assert responses[1] == "The front door is locked."
    _assert_at(game.state, "WEST-OF-HOUSE")


def test_brief_and_verbose(game: Game):
    responses = _run(game, ["north", "west"])
    # Second visit to West of House is brief
    assert "narrow path winds north" not in responses[1]
    responses = _run(game, ["verbose", "north", "west"])
    assert "narrow path winds north" in responses[2]


def test_kitchen_contents(game: Game):
    game.state.current_room_id = "KITCHEN"
    text = game.describe_room()
    assert "There is a kitchen table here." in text
    assert "The kitchen table contains a brown sack." in text

    responses = _run(game, ["take sack", "open sack", "inventory"])
    assert responses[0] == "Taken."
    assert responses[1] == "Opening the brown sack reveals the lunch."
    assert responses[2] == "You are carrying:\n  a brown sack\n    a lunch"
