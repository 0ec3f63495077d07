"""Build a World from the JSON definitions in ``grue.data``.

Two files make up a world:

- rooms.json: ``{"rooms": [{"id", "name", "description", "longDescription",
  "flags", "exits", "globalItems"}]}``. An exit is either a destination room
  id or an object with ``destination``, ``message`` and ``door``.
- objects.json: ``{"objects": [{"id", "name", "description", "synonyms",
  "adjectives", "flags", "size", "capacity", "value", "text", "key",
  "location"}]}``.

Flags are given by name, case-insensitively. Objects are placed with
World.move_object in file order, so a container's contents come out in the
order they are listed.
"""

import json
from collections.abc import Iterable
from importlib import resources
from pathlib import Path
from typing import Any

from ..logging import get_logger
from .lighting import Lighting
from .objects import Direction, GameObject, ObjectFlags, Room, RoomExit, RoomFlags
from .world import DEFAULT_MAX_WEIGHT, World, WorldError

logger = get_logger(__name__)

ROOMS_FILE = "rooms.json"
OBJECTS_FILE = "objects.json"


class WorldBuildError(WorldError):
    """The world definitions don't hold together."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


def _get_data_path() -> Path:
    """Locate the bundled world data (works when installed in a venv)."""
    return Path(str(resources.files("grue.data")))


def _flag_key(name: str) -> str:
    return name.strip().upper().replace("_", "").replace("-", "")


def _parse_flags(names: Iterable[str], flag_type: type, owner: str) -> Any:
    """Combine flag names ("IsOpen", "is_open", "ISOPEN") into one value."""
    members = {_flag_key(key): value for key, value in flag_type.__members__.items()}
    result = flag_type.NONE
    for name in names:
        member = members.get(_flag_key(name))
        if member is None:
            logger.warning("unknown_flag", flag=name, owner=owner)
            continue
        result |= member
    return result


def _parse_exit(value: Any) -> RoomExit:
    if isinstance(value, str):
        return RoomExit(destination=value)
    if isinstance(value, dict):
        return RoomExit(
            destination=value.get("destination"),
            message=value.get("message"),
            door=value.get("door"),
        )
    return RoomExit()


def _room_from_data(data: dict[str, Any]) -> Room:
    room_id = data["id"]
    description = data.get("description", "")
    room = Room(
        id=room_id,
        name=data.get("name", ""),
        description=description,
        long_description=data.get("longDescription") or description,
        flags=_parse_flags(data.get("flags", []), RoomFlags, room_id),
        global_items=list(data.get("globalItems", [])),
    )
    for key, value in data.get("exits", {}).items():
        direction = Direction.from_word(key)
        if direction is None:
            logger.warning("unknown_direction", direction=key, room_id=room_id)
            continue
        room.exits[direction] = _parse_exit(value)
    return room


def _object_from_data(data: dict[str, Any]) -> GameObject:
    obj_id = data["id"]
    return GameObject(
        id=obj_id,
        name=data.get("name", ""),
        description=data.get("description", ""),
        synonyms=set(data.get("synonyms", [])),
        adjectives=set(data.get("adjectives", [])),
        flags=_parse_flags(data.get("flags", []), ObjectFlags, obj_id),
        size=int(data.get("size", 0)),
        capacity=int(data.get("capacity", 0)),
        value=int(data.get("value", 0)),
        text=data.get("text", ""),
        key=data.get("key"),
    )


def _read_json(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def load_rooms(world: World, path: Path) -> int:
    data = _read_json(path)
    rooms = data.get("rooms", [])
    for room_data in rooms:
        world.add_room(_room_from_data(room_data))
    return len(rooms)


def load_objects(world: World, path: Path) -> int:
    """Register every object, then place each one at its location."""
    data = _read_json(path)
    objects = data.get("objects", [])
    for obj_data in objects:
        world.add_object(_object_from_data(obj_data))

    problems = []
    for obj_data in objects:
        location = obj_data.get("location")
        if location is None:
            continue
        if not world.move_object(obj_data["id"], location):
            problems.append(
                f"object {obj_data['id']!r} can't be placed at {location!r}"
            )
    if problems:
        raise WorldBuildError(problems)
    return len(objects)


def load_world(
    data_dir: Path | None = None,
    lighting: Lighting | None = None,
    max_weight: int = DEFAULT_MAX_WEIGHT,
) -> World:
    """Load rooms and objects and check that every reference resolves."""
    data_dir = data_dir or _get_data_path()
    world = World(lighting=lighting, max_weight=max_weight)

    rooms = load_rooms(world, data_dir / ROOMS_FILE)
    objects = load_objects(world, data_dir / OBJECTS_FILE)

    problems = world.validate()
    if problems:
        for problem in problems:
            logger.error("world_integrity_problem", problem=problem)
        raise WorldBuildError(problems)

    logger.info("world_loaded", data_dir=str(data_dir), rooms=rooms, objects=objects)
    return world
