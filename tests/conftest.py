"""Shared test fixtures for Grue."""

from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from grue.engine.loader import load_world
from grue.engine.objects import (
    Direction,
    GameObject,
    ObjectFlags,
    Room,
    RoomExit,
    RoomFlags,
)
from grue.engine.state import GameState, new_game_state
from grue.engine.world import World
from grue.users import get_or_create_player


@pytest.fixture
def world() -> World:
    """The bundled sample world."""
    return load_world()


@pytest.fixture
def state(world: World) -> GameState:
    return new_game_state(world)


@pytest.fixture
def small_world() -> World:
    """A lit room holding a lamp and a closed mailbox with a leaflet."""
    w = World()
    field = Room(
        id="FIELD",
        name="Field",
        description="An open field.",
        flags=RoomFlags.LIGHT,
    )
    field.exits[Direction.EAST] = RoomExit(destination="CAVE")
    cave = Room(id="CAVE", name="Cave", description="A damp cave.")
    cave.exits[Direction.WEST] = RoomExit(destination="FIELD")
    w.add_room(field)
    w.add_room(cave)

    w.add_object(
        GameObject(
            id="LAMP",
            name="brass lantern",
            description="A brass lantern.",
            synonyms={"lamp", "lantern"},
            adjectives={"brass"},
            flags=ObjectFlags.VISIBLE | ObjectFlags.TAKEABLE | ObjectFlags.LIGHT,
            size=5,
        )
    )
    w.add_object(
        GameObject(
            id="MAILBOX",
            name="small mailbox",
            description="A small mailbox.",
            synonyms={"mailbox", "box"},
            adjectives={"small"},
            flags=ObjectFlags.VISIBLE | ObjectFlags.CONTAINER | ObjectFlags.OPENABLE,
            capacity=10,
        )
    )
    w.add_object(
        GameObject(
            id="LEAFLET",
            name="leaflet",
            description="A leaflet.",
            flags=ObjectFlags.VISIBLE | ObjectFlags.TAKEABLE | ObjectFlags.READABLE,
            size=2,
            text="WELCOME!",
        )
    )
    assert w.move_object("LAMP", "FIELD")
    assert w.move_object("MAILBOX", "FIELD")
    assert w.move_object("LEAFLET", "MAILBOX")
    return w


@pytest.fixture
def small_state(small_world: World) -> GameState:
    return new_game_state(small_world, start_room="FIELD")


@pytest.fixture
def db_engine(tmp_path: Path):
    db_url = f"sqlite:///{tmp_path}/test.db"
    engine = create_engine(db_url)
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def test_player(db_session: Session):
    return get_or_create_player(db_session, "tester")
