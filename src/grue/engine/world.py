"""The World: sole owner of rooms and objects and of where things are.

Every spatial query routes through here, and ``move_object`` is the only
way an object changes place. Lookups return None for unknown ids because
"not found" is an everyday outcome while playing, not an error.
"""

from collections.abc import Iterator

from .lighting import AlwaysLit, Lighting
from .objects import GameObject, Room

# Reserved location for objects the player is carrying
PLAYER = "PLAYER"

DEFAULT_MAX_WEIGHT = 100


class WorldError(ValueError):
    """The world definition is inconsistent."""


class DuplicateIdError(WorldError):
    pass


class Inventory:
    """The player's carried object ids, with a weight ceiling."""

    def __init__(self, world: "World", max_weight: int = DEFAULT_MAX_WEIGHT):
        self.world = world
        self.max_weight = max_weight
        self.items: list[str] = []

    @property
    def total_weight(self) -> int:
        total = 0
        for obj_id in self.items:
            obj = self.world.get_object(obj_id)
            if obj is not None:
                total += obj.size
        return total

    def contains(self, obj_id: str) -> bool:
        return obj_id in self.items

    def can_carry(self, obj: GameObject) -> bool:
        return self.total_weight + obj.size <= self.max_weight

    def add(self, obj_id: str) -> bool:
        """Add an object if it exists, isn't held yet and isn't too heavy."""
        obj = self.world.get_object(obj_id)
        if obj is None or obj_id in self.items:
            return False
        if not self.can_carry(obj):
            return False
        self.items.append(obj_id)
        return True

    def remove(self, obj_id: str) -> bool:
        if obj_id not in self.items:
            return False
        self.items.remove(obj_id)
        return True

    def get_all_items(self) -> list[GameObject]:
        objs = (self.world.get_object(obj_id) for obj_id in self.items)
        return [obj for obj in objs if obj is not None]


class World:
    """Registry of rooms and objects plus the player's inventory."""

    def __init__(
        self,
        lighting: Lighting | None = None,
        max_weight: int = DEFAULT_MAX_WEIGHT,
    ):
        self.rooms: dict[str, Room] = {}
        self.objects: dict[str, GameObject] = {}
        self.lighting: Lighting = lighting or AlwaysLit()
        self.player_inventory = Inventory(self, max_weight)
        # (object id, holder it left, index it had there) for the latest move
        self._last_departure: tuple[str, str, int] | None = None

    # -- registration -----------------------------------------------------

    def add_room(self, room: Room) -> None:
        """Register a room. A second room with the same id is rejected."""
        if room.id in self.rooms or room.id == PLAYER:
            raise DuplicateIdError(f"room id {room.id!r} is already registered")
        self.rooms[room.id] = room

    def add_object(self, obj: GameObject) -> None:
        """Register an object. A second object with the same id is rejected."""
        if obj.id in self.objects or obj.id == PLAYER:
            raise DuplicateIdError(f"object id {obj.id!r} is already registered")
        self.objects[obj.id] = obj

    def get_room(self, room_id: str | None) -> Room | None:
        if room_id is None:
            return None
        return self.rooms.get(room_id)

    def get_object(self, obj_id: str | None) -> GameObject | None:
        if obj_id is None:
            return None
        return self.objects.get(obj_id)

    # -- lighting and visibility ------------------------------------------

    def is_room_lit(self, room_id: str) -> bool:
        return self.lighting.is_room_lit(room_id, self)

    def _resolve(self, ids: list[str]) -> Iterator[GameObject]:
        for obj_id in ids:
            obj = self.objects.get(obj_id)
            if obj is not None:
                yield obj

    def get_visible_objects_in_room(self, room_id: str) -> list[GameObject]:
        """Visible objects in the room's items, then its global items."""
        room = self.get_room(room_id)
        if room is None or not self.is_room_lit(room_id):
            return []
        return [
            obj
            for obj in self._resolve(room.items + room.global_items)
            if obj.is_visible
        ]

    def _search(self, candidates: list[GameObject], token: str) -> GameObject | None:
        """First match among candidates, then inside their open containers."""
        for obj in candidates:
            if obj.matches_name(token):
                return obj
        for obj in candidates:
            if obj.is_container and obj.is_open:
                inner = [o for o in self._resolve(obj.contents) if o.is_visible]
                found = self._search(inner, token)
                if found is not None:
                    return found
        return None

    def find_object_in_room(self, room_id: str, token: str | None) -> GameObject | None:
        """Find a visible object in the room by name; first match wins."""
        if not token:
            return None
        return self._search(self.get_visible_objects_in_room(room_id), token)

    def find_object_in_inventory(self, token: str | None) -> GameObject | None:
        """Find a carried object by name; first match wins."""
        if not token:
            return None
        return self._search(self.player_inventory.get_all_items(), token)

    # -- containment ------------------------------------------------------

    def container_load(self, container: GameObject) -> int:
        return sum(obj.size for obj in self._resolve(container.contents))

    def can_contain(self, container: GameObject, candidate: GameObject) -> bool:
        return container.can_contain(candidate, self.container_load(container))

    def _placement_list(self, location_id: str | None) -> list[str] | None:
        if location_id is None:
            return None
        if location_id == PLAYER:
            return self.player_inventory.items
        room = self.rooms.get(location_id)
        if room is not None:
            return room.items
        container = self.objects.get(location_id)
        if container is not None:
            return container.contents
        return None

    def encloses(self, obj: GameObject, location_id: str) -> bool:
        """True if location_id is obj itself or somewhere inside it."""
        current: str | None = location_id
        seen: set[str] = set()
        while current is not None and current not in seen:
            if current == obj.id:
                return True
            seen.add(current)
            holder = self.objects.get(current)
            current = holder.location_id if holder is not None else None
        return False

    def _fits(self, obj: GameObject, location_id: str) -> bool:
        """Capacity check for object holders; rooms and the player take anything.

        Open/closed doesn't matter here: the world is built with things
        already inside closed containers.
        """
        if location_id == PLAYER or location_id in self.rooms:
            return True
        holder = self.objects[location_id]
        return self.container_load(holder) + obj.size <= holder.capacity

    def move_object(self, obj_id: str, new_location_id: str) -> bool:
        """Relocate an object to a room, a container or the player.

        Returns False without touching anything when either id is unknown,
        the move would put an object inside itself, or the holder is full.
        Objects are appended to their new holder, except that an object
        moved straight back to where it just came from gets its old slot
        back.
        """
        obj = self.objects.get(obj_id)
        if obj is None:
            return False
        destination = self._placement_list(new_location_id)
        if destination is None:
            return False
        if new_location_id == obj.location_id:
            return True
        if self.encloses(obj, new_location_id):
            return False
        if not self._fits(obj, new_location_id):
            return False

        old_location = obj.location_id
        old_index = None
        source = self._placement_list(old_location)
        if source is not None and obj_id in source:
            old_index = source.index(obj_id)
            source.remove(obj_id)

        obj.location_id = new_location_id
        if obj_id not in destination:
            last = self._last_departure
            if last is not None and last[:2] == (obj_id, new_location_id):
                destination.insert(min(last[2], len(destination)), obj_id)
            else:
                destination.append(obj_id)

        if old_location is not None and old_index is not None:
            self._last_departure = (obj_id, old_location, old_index)
        else:
            self._last_departure = None
        return True

    def holder_room_id(self, obj: GameObject) -> str | None:
        """The room an object is ultimately in, or None if carried/unplaced."""
        location = obj.location_id
        seen: set[str] = set()
        while location is not None and location not in seen:
            if location in self.rooms:
                return location
            seen.add(location)
            holder = self.objects.get(location)
            location = holder.location_id if holder is not None else None
        return None

    # -- integrity --------------------------------------------------------

    def validate(self) -> list[str]:
        """Report every dangling reference and misplaced id."""
        problems: list[str] = []

        for obj in self.objects.values():
            loc = obj.location_id
            if loc is not None and self._placement_list(loc) is None:
                problems.append(f"object {obj.id!r} is in unknown location {loc!r}")
            for child_id in obj.contents:
                child = self.objects.get(child_id)
                if child is None:
                    problems.append(f"object {obj.id!r} contains unknown {child_id!r}")
                elif child.location_id != obj.id:
                    problems.append(
                        f"object {child_id!r} is listed in {obj.id!r} "
                        f"but located at {child.location_id!r}"
                    )
            if obj.contents and self.container_load(obj) > obj.capacity:
                problems.append(
                    f"object {obj.id!r} holds {self.container_load(obj)} "
                    f"but has capacity {obj.capacity}"
                )
            if obj.key is not None and obj.key not in self.objects:
                problems.append(f"object {obj.id!r} has unknown key {obj.key!r}")

        for room in self.rooms.values():
            for obj_id in room.items:
                obj = self.objects.get(obj_id)
                if obj is None:
                    problems.append(f"room {room.id!r} holds unknown {obj_id!r}")
                elif obj.location_id != room.id:
                    problems.append(
                        f"object {obj_id!r} is listed in {room.id!r} "
                        f"but located at {obj.location_id!r}"
                    )
            for obj_id in room.global_items:
                if obj_id not in self.objects:
                    problems.append(f"room {room.id!r} shares unknown {obj_id!r}")
            for direction, exit_ in room.exits.items():
                dest = exit_.destination
                if dest is not None and dest not in self.rooms:
                    problems.append(
                        f"room {room.id!r} exit {direction.value} leads to "
                        f"unknown room {dest!r}"
                    )
                if exit_.door is not None and exit_.door not in self.objects:
                    problems.append(
                        f"room {room.id!r} exit {direction.value} uses "
                        f"unknown door {exit_.door!r}"
                    )

        for obj_id in self.player_inventory.items:
            obj = self.objects.get(obj_id)
            if obj is None or obj.location_id != PLAYER:
                problems.append(f"inventory entry {obj_id!r} is not held")

        return problems
