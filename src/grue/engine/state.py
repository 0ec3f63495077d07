"""Mutable per-session game state.

Holds only ids, counters and flags, never World objects, so it can be
pickled alongside the World it refers to.
"""

from dataclasses import dataclass, field
from typing import Any

from .lighting import LightSystem
from .world import World

START_ROOM = "WEST-OF-HOUSE"


@dataclass
class GameState:
    """Everything about a session that isn't where things are."""

    current_room_id: str = START_ROOM
    score: int = 0
    moves: int = 0

    # Puzzle and quest state, keyed by name
    flags: dict[str, Any] = field(default_factory=dict)

    visited_rooms: set[str] = field(default_factory=set)
    # Objects whose value has already been added to the score
    scored_objects: set[str] = field(default_factory=set)

    verbose: bool = False
    is_dark: bool = False
    has_won: bool = False
    is_dead: bool = False
    has_quit: bool = False

    @property
    def is_finished(self) -> bool:
        return self.has_won or self.is_dead or self.has_quit

    def get_flag(self, name: str, default: Any = None) -> Any:
        return self.flags.get(name, default)

    def set_flag(self, name: str, value: Any = True) -> None:
        self.flags[name] = value


def new_game_state(
    world: World,
    start_room: str = START_ROOM,
    use_light_system: bool = True,
) -> GameState:
    """Create a fresh state in ``start_room``.

    By default the world's lighting is switched to a LightSystem that
    follows this state's current room.
    """
    if world.get_room(start_room) is None:
        raise ValueError(f"start room {start_room!r} is not in the world")
    state = GameState(current_room_id=start_room)
    if use_light_system:
        world.lighting = LightSystem(state)
    state.visited_rooms.add(start_room)
    state.is_dark = not world.is_room_lit(start_room)
    return state
