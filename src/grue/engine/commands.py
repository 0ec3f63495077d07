"""Command dispatch and handler functions.

Game.execute(raw_input) -> CommandResult is the main entry point for a
session. It parses the line, looks the canonical verb up in a
CommandFactory and runs the handler against the World and GameState.

Every handler has the same shape, (parsed, world, state) -> CommandResult,
and validates fully before it mutates anything.
"""

import dataclasses
import enum
from collections.abc import Callable

from ..logging import get_logger
from .history import CommandHistory, PronounTracker
from .objects import Direction, GameObject, ObjectFlags
from .parser import ParsedCommand, Parser
from .state import GameState
from .text import join_names, with_definite_article, with_indefinite_article
from .world import PLAYER, World

logger = get_logger(__name__)

UNREGISTERED_MESSAGE = "I don't know how to do that."
DARKNESS_MESSAGE = "It is pitch black. You are likely to be eaten by a grue."

# Verbs that don't use up a move
META_VERBS = frozenset({"score", "verbose", "brief", "quit"})

# Prepositions "put" accepts for placing things in containers
_PUT_PREPOSITIONS = frozenset({"in", "into", "inside", "on", "onto"})


class CommandStatus(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: status, narration, and whether to redisplay."""

    status: CommandStatus
    message: str = ""
    should_display_room: bool = False

    @classmethod
    def success(cls, message: str = "", should_display_room: bool = False):
        return cls(CommandStatus.SUCCESS, message, should_display_room)

    @classmethod
    def failed(cls, message: str):
        return cls(CommandStatus.FAILED, message)

    @property
    def succeeded(self) -> bool:
        return self.status is CommandStatus.SUCCESS


Handler = Callable[[ParsedCommand, World, GameState], CommandResult]


# -- resolution helpers ----------------------------------------------------


def _find_here(world: World, state: GameState, phrase: str) -> GameObject | None:
    """Resolve a phrase against the current room, then the inventory."""
    obj = world.find_object_in_room(state.current_room_id, phrase)
    if obj is None:
        obj = world.find_object_in_inventory(phrase)
    return obj


def _not_here(phrase: str) -> CommandResult:
    return CommandResult.failed(f"You don't see any {phrase} here.")


def _is_held(world: World, obj: GameObject) -> bool:
    """Carried directly or inside something carried."""
    location = obj.location_id
    seen: set[str] = set()
    while location is not None and location not in seen:
        if location == PLAYER:
            return True
        seen.add(location)
        holder = world.get_object(location)
        location = holder.location_id if holder is not None else None
    return False


def _move_failed(obj: GameObject, destination: str) -> CommandResult:
    logger.error(
        "object_move_failed",
        object_id=obj.id,
        location_id=obj.location_id,
        destination=destination,
    )
    return CommandResult.failed("Something prevents you from doing that.")


def _visible_contents(world: World, container: GameObject) -> list[GameObject]:
    objs = (world.get_object(obj_id) for obj_id in container.contents)
    return [obj for obj in objs if obj is not None and obj.is_visible]


# -- handlers ---------------------------------------------------------------


def _cmd_take(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to take?")

    obj = world.find_object_in_room(state.current_room_id, phrase)
    if obj is None:
        held = world.find_object_in_inventory(phrase)
        if held is not None and world.player_inventory.contains(held.id):
            return CommandResult.failed(f"You already have the {held.name}.")
        if held is None:
            return _not_here(phrase)
        obj = held  # inside something carried: lift it out

    if not obj.is_takeable:
        return CommandResult.failed(f"You can't take the {obj.name}.")

    inventory = world.player_inventory
    if not inventory.can_carry(obj):
        return CommandResult.failed("Your load is too heavy.")
    if not inventory.add(obj.id):
        return CommandResult.failed(f"You can't take the {obj.name}.")
    if not world.move_object(obj.id, PLAYER):
        inventory.remove(obj.id)
        return _move_failed(obj, PLAYER)

    if obj.value and obj.id not in state.scored_objects:
        state.scored_objects.add(obj.id)
        state.score += obj.value
    return CommandResult.success("Taken.")


def _cmd_drop(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to drop?")

    obj = world.find_object_in_inventory(phrase)
    if obj is None:
        return CommandResult.failed(f"You don't have any {phrase}.")

    inventory = world.player_inventory
    was_carried = inventory.remove(obj.id)
    if not world.move_object(obj.id, state.current_room_id):
        if was_carried:
            inventory.items.append(obj.id)
        return _move_failed(obj, state.current_room_id)
    return CommandResult.success("Dropped.")


def _cmd_open(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to open?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.has_flag(ObjectFlags.OPENABLE):
        return CommandResult.failed(f"You can't open the {obj.name}.")
    if obj.has_flag(ObjectFlags.LOCKED):
        return CommandResult.failed(f"The {obj.name} is locked.")
    if obj.is_open:
        return CommandResult.failed(f"The {obj.name} is already open.")

    obj.set_flag(ObjectFlags.IS_OPEN)

    contents = _visible_contents(world, obj) if obj.is_container else []
    if len(contents) == 1:
        revealed = with_definite_article(contents[0].name)
        return CommandResult.success(f"Opening the {obj.name} reveals {revealed}.")
    if contents:
        names = ", ".join(item.name for item in contents)
        return CommandResult.success(f"Opening the {obj.name} reveals: {names}.")
    return CommandResult.success(f"The {obj.name} is now open.")


def _cmd_close(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to close?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.has_flag(ObjectFlags.OPENABLE):
        return CommandResult.failed(f"You can't close the {obj.name}.")
    if not obj.is_open:
        return CommandResult.failed(f"The {obj.name} is already closed.")

    obj.clear_flag(ObjectFlags.IS_OPEN)
    return CommandResult.success(f"The {obj.name} is now closed.")


def _cmd_look(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    return CommandResult.success(should_display_room=True)


def _cmd_examine(
    parsed: ParsedCommand, world: World, state: GameState
) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to examine?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    text = obj.description or f"There's nothing special about the {obj.name}."
    if obj.is_container and obj.is_open:
        contents = _visible_contents(world, obj)
        if contents:
            names = join_names(
                [with_indefinite_article(item.name) for item in contents]
            )
            text += f"\nThe {obj.name} contains {names}."
    return CommandResult.success(text)


def _cmd_search(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    """Look inside a container: "look in mailbox", "search case"."""
    phrase = parsed.direct_object or parsed.indirect_object
    if phrase is None:
        return CommandResult.failed("What do you want to look in?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.is_container:
        return CommandResult.failed(f"You can't look inside the {obj.name}.")
    if not obj.is_open:
        return CommandResult.failed(f"The {obj.name} is closed.")

    contents = _visible_contents(world, obj)
    if not contents:
        return CommandResult.success(f"The {obj.name} is empty.")
    names = join_names([with_indefinite_article(item.name) for item in contents])
    return CommandResult.success(f"The {obj.name} contains {names}.")


def _inventory_lines(world: World, objs: list[GameObject], depth: int) -> list[str]:
    lines = []
    for obj in objs:
        lines.append("  " * depth + with_indefinite_article(obj.name))
        if obj.is_container and obj.is_open:
            inner = _visible_contents(world, obj)
            lines.extend(_inventory_lines(world, inner, depth + 1))
    return lines


def _cmd_inventory(
    parsed: ParsedCommand, world: World, state: GameState
) -> CommandResult:
    items = world.player_inventory.get_all_items()
    if not items:
        return CommandResult.success("You are empty-handed.")
    lines = _inventory_lines(world, items, 1)
    return CommandResult.success("You are carrying:\n" + "\n".join(lines))


def _cmd_go(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    word = parsed.direct_object
    if word is None and parsed.indirect_object is None:
        # "go in" parses "in" as a preposition
        word = parsed.preposition
    if word is None:
        return CommandResult.failed("Where do you want to go?")

    direction = Direction.from_word(word)
    if direction is None:
        return CommandResult.failed("I don't know that direction.")

    room = world.get_room(state.current_room_id)
    exit_ = room.get_exit(direction) if room is not None else None
    if exit_ is None:
        return CommandResult.failed("You can't go that way.")
    if exit_.is_blocked:
        return CommandResult.failed(exit_.message or "You can't go that way.")

    if exit_.door is not None:
        door = world.get_object(exit_.door)
        if door is not None and not door.is_open:
            return CommandResult.failed(f"The {door.name} is closed.")

    if world.get_room(exit_.destination) is None:
        logger.error(
            "exit_destination_missing",
            room_id=state.current_room_id,
            direction=direction.value,
            destination=exit_.destination,
        )
        return CommandResult.failed("You can't go that way.")

    state.current_room_id = exit_.destination
    return CommandResult.success(exit_.message or "", should_display_room=True)


def _cmd_put(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to put?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if parsed.indirect_object is None:
        return CommandResult.failed(f"Where do you want to put the {obj.name}?")
    if parsed.preposition not in _PUT_PREPOSITIONS:
        return CommandResult.failed(
            f"You can't put the {obj.name} {parsed.preposition} anything."
        )

    target = _find_here(world, state, parsed.indirect_object)
    if target is None:
        return _not_here(parsed.indirect_object)
    if target is obj or world.encloses(obj, target.id):
        return CommandResult.failed(f"You can't put the {obj.name} inside itself.")
    if not target.is_container:
        return CommandResult.failed(f"You can't put things in the {target.name}.")
    if not target.is_open:
        return CommandResult.failed(f"The {target.name} isn't open.")
    if obj.location_id == target.id:
        return CommandResult.failed(f"The {obj.name} is already there.")
    if not obj.is_takeable and not _is_held(world, obj):
        return CommandResult.failed(f"You can't move the {obj.name}.")
    if not world.can_contain(target, obj):
        return CommandResult.failed(f"There's no room in the {target.name}.")

    inventory = world.player_inventory
    was_carried = inventory.remove(obj.id)
    if not world.move_object(obj.id, target.id):
        if was_carried:
            inventory.items.append(obj.id)
        return _move_failed(obj, target.id)
    return CommandResult.success("Done.")


def _cmd_read(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to read?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.has_flag(ObjectFlags.READABLE):
        return CommandResult.failed(f"There's nothing written on the {obj.name}.")
    return CommandResult.success(obj.text or obj.description)


def _cmd_light(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to light?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.has_flag(ObjectFlags.LIGHT):
        return CommandResult.failed(f"You can't turn on the {obj.name}.")
    if obj.has_flag(ObjectFlags.ON):
        return CommandResult.failed(f"The {obj.name} is already on.")

    obj.set_flag(ObjectFlags.ON)
    return CommandResult.success(f"The {obj.name} is now on.")


def _cmd_extinguish(
    parsed: ParsedCommand, world: World, state: GameState
) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to turn off?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if not obj.has_flag(ObjectFlags.LIGHT):
        return CommandResult.failed(f"You can't turn off the {obj.name}.")
    if not obj.has_flag(ObjectFlags.ON):
        return CommandResult.failed(f"The {obj.name} is already off.")

    obj.clear_flag(ObjectFlags.ON)
    return CommandResult.success(f"The {obj.name} is now off.")


def _resolve_key(
    parsed: ParsedCommand, world: World, obj: GameObject, verb: str
) -> GameObject | CommandResult:
    """Find the key named after "with", or a failure to report."""
    if parsed.indirect_object is None:
        return CommandResult.failed(f"{verb.capitalize()} the {obj.name} with what?")
    key = world.find_object_in_inventory(parsed.indirect_object)
    if key is None:
        return CommandResult.failed(f"You don't have any {parsed.indirect_object}.")
    if obj.key != key.id:
        return CommandResult.failed(f"The {key.name} doesn't fit the {obj.name}.")
    return key


def _cmd_unlock(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to unlock?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if obj.key is None:
        return CommandResult.failed(f"You can't unlock the {obj.name}.")
    if not obj.has_flag(ObjectFlags.LOCKED):
        return CommandResult.failed(f"The {obj.name} isn't locked.")
    key = _resolve_key(parsed, world, obj, "unlock")
    if isinstance(key, CommandResult):
        return key

    obj.clear_flag(ObjectFlags.LOCKED)
    return CommandResult.success(f"The {obj.name} is now unlocked.")


def _cmd_lock(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    phrase = parsed.direct_object
    if phrase is None:
        return CommandResult.failed("What do you want to lock?")

    obj = _find_here(world, state, phrase)
    if obj is None:
        return _not_here(phrase)
    if obj.key is None:
        return CommandResult.failed(f"You can't lock the {obj.name}.")
    if obj.has_flag(ObjectFlags.LOCKED):
        return CommandResult.failed(f"The {obj.name} is already locked.")
    if obj.is_open:
        return CommandResult.failed(f"You'll have to close the {obj.name} first.")
    key = _resolve_key(parsed, world, obj, "lock")
    if isinstance(key, CommandResult):
        return key

    obj.set_flag(ObjectFlags.LOCKED)
    return CommandResult.success(f"The {obj.name} is now locked.")


def _score_line(state: GameState) -> str:
    moves = "move" if state.moves == 1 else "moves"
    return f"Your score is {state.score}, in {state.moves} {moves}."


def _cmd_score(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    return CommandResult.success(_score_line(state))


def _cmd_verbose(
    parsed: ParsedCommand, world: World, state: GameState
) -> CommandResult:
    state.verbose = True
    return CommandResult.success("Maximum verbosity.")


def _cmd_brief(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    state.verbose = False
    return CommandResult.success("Brief descriptions.")


def _cmd_wait(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    return CommandResult.success("Time passes...")


def _cmd_quit(parsed: ParsedCommand, world: World, state: GameState) -> CommandResult:
    state.has_quit = True
    return CommandResult.success(_score_line(state) + "\nGoodbye.")


_VERB_DISPATCH: dict[str, Handler] = {
    "take": _cmd_take,
    "drop": _cmd_drop,
    "open": _cmd_open,
    "close": _cmd_close,
    "look": _cmd_look,
    "examine": _cmd_examine,
    "search": _cmd_search,
    "inventory": _cmd_inventory,
    "go": _cmd_go,
    "put": _cmd_put,
    "read": _cmd_read,
    "light": _cmd_light,
    "extinguish": _cmd_extinguish,
    "unlock": _cmd_unlock,
    "lock": _cmd_lock,
    "score": _cmd_score,
    "verbose": _cmd_verbose,
    "brief": _cmd_brief,
    "wait": _cmd_wait,
    "quit": _cmd_quit,
}


class CommandFactory:
    """Maps canonical verbs to handlers. Built once per game."""

    def __init__(self, handlers: dict[str, Handler] | None = None):
        self._handlers = dict(_VERB_DISPATCH if handlers is None else handlers)

    def get(self, verb: str | None) -> Handler | None:
        if verb is None:
            return None
        return self._handlers.get(verb)

    def register(self, verb: str, handler: Handler) -> None:
        self._handlers[verb] = handler

    def verbs(self) -> list[str]:
        return sorted(self._handlers)


# -- room rendering ---------------------------------------------------------


def get_visible_objects(world: World, state: GameState) -> list[str]:
    """One line per visible object lying in the current room."""
    room = world.get_room(state.current_room_id)
    if room is None or not world.is_room_lit(room.id):
        return []

    lines = []
    for obj in world.get_visible_objects_in_room(room.id):
        if obj.id not in room.items:
            continue  # scenery shared between rooms
        lines.append(f"There is {with_indefinite_article(obj.name)} here.")
        if obj.is_container and obj.is_open:
            contents = _visible_contents(world, obj)
            if contents:
                names = join_names(
                    [with_indefinite_article(item.name) for item in contents]
                )
                lines.append(f"The {obj.name} contains {names}.")
    return lines


def get_room_description(world: World, state: GameState, long: bool = False) -> str:
    """Describe the current room: name, description and what lies about."""
    room = world.get_room(state.current_room_id)
    if room is None:
        return "You are in a mysterious place."
    if not world.is_room_lit(room.id):
        return DARKNESS_MESSAGE

    parts = [room.name]
    text = (room.long_description or room.description) if long else room.description
    if text:
        parts.append(text.strip())
    objects = get_visible_objects(world, state)
    if objects:
        parts.append("\n".join(objects))
    return "\n".join(parts)


def describe_room(world: World, state: GameState, force_long: bool = False) -> str:
    """Describe the current room, long on first visit or in verbose mode.

    Marks a lit room as visited; a dark one stays unvisited so its full
    description shows once the player can see it.
    """
    room_id = state.current_room_id
    first_visit = room_id not in state.visited_rooms
    long = force_long or state.verbose or first_visit
    text = get_room_description(world, state, long=long)
    if world.is_room_lit(room_id):
        state.visited_rooms.add(room_id)
    return text


def render_result(
    world: World, state: GameState, result: CommandResult, force_long: bool = False
) -> str:
    """The message, then the room description when the result asks for it."""
    parts = []
    if result.message:
        parts.append(result.message)
    if result.should_display_room:
        parts.append(describe_room(world, state, force_long=force_long))
    return "\n\n".join(parts)


# -- turn loop ----------------------------------------------------------------


class Game:
    """One session's turn loop over an explicitly passed World and GameState."""

    def __init__(
        self,
        world: World,
        state: GameState,
        parser: Parser | None = None,
        factory: CommandFactory | None = None,
    ):
        self.world = world
        self.state = state
        self.parser = parser or Parser()
        self.factory = factory or CommandFactory()
        self.history = CommandHistory()
        self.pronouns = PronounTracker()
        self.last_command: ParsedCommand | None = None

    def execute(self, raw_input: str | None) -> CommandResult:
        """Run one turn and return its result.

        Parse failures and unknown verbs leave the move counter alone.
        """
        parsed = self.parser.parse(raw_input)
        self.last_command = parsed
        if not parsed.is_valid:
            logger.debug("parse_failed", raw_input=raw_input)
            if raw_input and raw_input.strip():
                # Kept for OOPS, but never repeated by AGAIN
                self.history.add(raw_input.strip(), accepted=False)
            return CommandResult.failed(parsed.error_message or "I beg your pardon?")

        if parsed.verb == "again":
            previous = self.history.previous()
            if previous is None:
                return CommandResult.failed("There is nothing to repeat.")
            parsed = self.parser.parse(previous)
            self.last_command = parsed
            if not parsed.is_valid:
                return CommandResult.failed(parsed.error_message or "")
            return self._dispatch(parsed)

        if parsed.verb == "oops":
            if parsed.direct_object is None:
                return CommandResult.failed("What word did you mean?")
            line = self.history.replace_last_word(parsed.direct_object)
            if line is None:
                return CommandResult.failed("There is nothing to correct.")
            parsed = self.parser.parse(line)
            self.last_command = parsed
            if not parsed.is_valid:
                return CommandResult.failed(parsed.error_message or "")
            self.history.accept(line)
            return self._dispatch(parsed)

        self.history.add((raw_input or "").strip())
        return self._dispatch(parsed)

    def _dispatch(self, parsed: ParsedCommand) -> CommandResult:
        parsed = self.pronouns.resolve(parsed)
        self.last_command = parsed

        handler = self.factory.get(parsed.verb)
        if handler is None:
            logger.info("command_unregistered", verb=parsed.verb)
            return CommandResult.failed(UNREGISTERED_MESSAGE)

        was_dark = not self.world.is_room_lit(self.state.current_room_id)
        result = handler(parsed, self.world, self.state)
        if parsed.verb not in META_VERBS:
            self.state.moves += 1
        if result.succeeded and parsed.verb != "go":
            self.pronouns.remember(parsed.direct_object)

        self.state.is_dark = not self.world.is_room_lit(self.state.current_room_id)
        if self.state.is_dark != was_dark and not result.should_display_room:
            result = dataclasses.replace(result, should_display_room=True)

        logger.debug(
            "command_executed",
            verb=parsed.verb,
            status=result.status.value,
            moves=self.state.moves,
        )
        return result

    def describe_room(self, force_long: bool = False) -> str:
        return describe_room(self.world, self.state, force_long=force_long)

    def render(self, result: CommandResult) -> str:
        last = self.last_command
        force_long = last is not None and last.verb == "look"
        return render_result(self.world, self.state, result, force_long=force_long)

    def play(self, raw_input: str | None) -> str:
        """Execute one line and return the text to show the player."""
        return self.render(self.execute(raw_input))


def handle_command(world: World, state: GameState, raw_input: str) -> CommandResult:
    """Run a single line without history; convenient for one-off turns."""
    return Game(world, state).execute(raw_input)
