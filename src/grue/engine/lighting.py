"""Lighting: decides whether the player can see in a room.

The World only asks ``is_room_lit``; it never works lighting out itself.
"""

from typing import TYPE_CHECKING, Protocol

from .objects import GameObject, RoomFlags

if TYPE_CHECKING:
    from .state import GameState
    from .world import World


class Lighting(Protocol):
    def is_room_lit(self, room_id: str, world: "World") -> bool: ...


class AlwaysLit:
    """Every room is lit. Used for worlds built without a light system."""

    def is_room_lit(self, room_id: str, world: "World") -> bool:
        return True


class LightSystem:
    """Rooms are lit by their own LIGHT flag or by a lit light source.

    A light source counts when it sits in the room, inside an open container
    in the room, or is carried by the player standing in the room.

    Reads the raw placement lists rather than the World's visibility
    queries, since those call back into here.
    """

    def __init__(self, state: "GameState"):
        self.state = state

    def is_room_lit(self, room_id: str, world: "World") -> bool:
        room = world.get_room(room_id)
        if room is None:
            return False
        if room.has_flag(RoomFlags.LIGHT):
            return True

        if self._any_lit(world, room.items):
            return True
        if self.state.current_room_id == room_id:
            return self._any_lit(world, world.player_inventory.items)
        return False

    def _any_lit(self, world: "World", ids: list[str]) -> bool:
        for obj_id in ids:
            obj = world.get_object(obj_id)
            if obj is None:
                continue
            if obj.is_lit or self._lit_inside(world, obj):
                return True
        return False

    def _lit_inside(self, world: "World", obj: GameObject) -> bool:
        if not (obj.is_container and obj.is_open):
            return False
        return self._any_lit(world, obj.contents)
