"""Rooms, objects and the flag sets they carry.

These are created once when the world is built and then mutated in place
for the life of a session. Cross-references (locations, exits, contents)
are plain ids resolved through the World, never direct object links.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag, auto


class ObjectFlags(IntFlag):
    NONE = 0
    TAKEABLE = auto()
    VISIBLE = auto()
    CONTAINER = auto()
    OPENABLE = auto()
    IS_OPEN = auto()
    LOCKED = auto()
    LIGHT = auto()  # can give off light
    WEAPON = auto()
    READABLE = auto()
    ON = auto()  # light source currently lit


class RoomFlags(IntFlag):
    NONE = 0
    LIGHT = auto()  # intrinsically lit
    OUTSIDE = auto()


class Direction(Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"
    UP = "up"
    DOWN = "down"
    IN = "in"
    OUT = "out"

    @classmethod
    def from_word(cls, word: str | None) -> "Direction | None":
        """Map a full direction name or its abbreviation, else None."""
        if not word:
            return None
        return _DIRECTION_WORDS.get(word.strip().lower())


_DIRECTION_WORDS: dict[str, Direction] = {d.value: d for d in Direction}
_DIRECTION_WORDS.update(
    {
        "n": Direction.NORTH,
        "s": Direction.SOUTH,
        "e": Direction.EAST,
        "w": Direction.WEST,
        "ne": Direction.NORTHEAST,
        "nw": Direction.NORTHWEST,
        "se": Direction.SOUTHEAST,
        "sw": Direction.SOUTHWEST,
        "u": Direction.UP,
        "d": Direction.DOWN,
        "inside": Direction.IN,
        "enter": Direction.IN,
        "outside": Direction.OUT,
        "exit": Direction.OUT,
    }
)


@dataclass
class RoomExit:
    """An exit from a room.

    With no destination the exit is blocked and ``message`` is the refusal.
    A ``door`` names an object that must be open before the exit can be used.
    """

    destination: str | None = None
    message: str | None = None
    door: str | None = None

    @property
    def is_blocked(self) -> bool:
        return self.destination is None


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


@dataclass
class GameObject:
    """Any interactive thing: an item, a piece of scenery or a container."""

    id: str
    name: str = ""
    description: str = ""
    synonyms: set[str] = field(default_factory=set)
    adjectives: set[str] = field(default_factory=set)
    flags: ObjectFlags = ObjectFlags.NONE
    size: int = 0
    capacity: int = 0
    location_id: str | None = None
    contents: list[str] = field(default_factory=list)
    value: int = 0
    text: str = ""
    key: str | None = None

    def has_flag(self, flag: ObjectFlags) -> bool:
        return (self.flags & flag) == flag

    def set_flag(self, flag: ObjectFlags) -> None:
        self.flags |= flag

    def clear_flag(self, flag: ObjectFlags) -> None:
        self.flags &= ~flag

    @property
    def is_takeable(self) -> bool:
        return self.has_flag(ObjectFlags.TAKEABLE)

    @property
    def is_visible(self) -> bool:
        return self.has_flag(ObjectFlags.VISIBLE)

    @property
    def is_container(self) -> bool:
        return self.has_flag(ObjectFlags.CONTAINER)

    @property
    def is_open(self) -> bool:
        return self.has_flag(ObjectFlags.IS_OPEN)

    @property
    def is_lit(self) -> bool:
        return self.has_flag(ObjectFlags.LIGHT | ObjectFlags.ON)

    def _nouns(self) -> set[str]:
        nouns = {_normalize(s) for s in self.synonyms}
        name = _normalize(self.name)
        if name:
            nouns.add(name.split()[-1])
        return nouns

    def matches_name(self, token: str | None) -> bool:
        """Check a noun phrase against the name, synonyms and adjectives.

        "brass lantern" matches "lamp", "lantern", "brass lantern" and
        "brass lamp". The description is never consulted.
        """
        if not token:
            return False
        phrase = _normalize(token)
        if not phrase:
            return False
        if phrase == _normalize(self.name):
            return True
        nouns = self._nouns()
        if phrase in nouns:
            return True

        adjectives = {_normalize(a) for a in self.adjectives}
        for noun in nouns:
            if not phrase.endswith(" " + noun):
                continue
            qualifiers = phrase[: -len(noun) - 1].split()
            if all(q in adjectives for q in qualifiers):
                return True
        return False

    def can_contain(self, candidate: "GameObject", load: int = 0) -> bool:
        """Check whether ``candidate`` fits, given the size already inside.

        ``load`` is the total size of the current contents; the World
        computes it since only it can resolve content ids.
        """
        if not self.is_container or not self.is_open:
            return False
        return load + candidate.size <= self.capacity


@dataclass
class Room:
    """A location node in the world graph."""

    id: str
    name: str = ""
    description: str = ""
    long_description: str = ""
    flags: RoomFlags = RoomFlags.NONE
    exits: dict[Direction, RoomExit] = field(default_factory=dict)
    items: list[str] = field(default_factory=list)
    global_items: list[str] = field(default_factory=list)

    def has_flag(self, flag: RoomFlags) -> bool:
        return (self.flags & flag) == flag

    def set_flag(self, flag: RoomFlags) -> None:
        self.flags |= flag

    def clear_flag(self, flag: RoomFlags) -> None:
        self.flags &= ~flag

    def get_exit(self, direction: Direction) -> RoomExit | None:
        return self.exits.get(direction)
