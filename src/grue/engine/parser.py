"""Turn one line of player input into a ParsedCommand.

Parsing is driven entirely by the static tables below. The parser knows
nothing about rooms or objects: noun phrases come out as raw text and are
resolved against the world by the command handlers.
"""

from dataclasses import dataclass, replace

EMPTY_INPUT_MESSAGE = "I beg your pardon?"

ARTICLES = frozenset({"a", "an", "the"})

PREPOSITIONS = frozenset(
    {
        "with",
        "in",
        "into",
        "inside",
        "on",
        "onto",
        "at",
        "to",
        "from",
        "under",
        "behind",
        "through",
        "off",
    }
)

# Two-word verbs, checked before the single-word table
MULTIWORD_VERBS: dict[tuple[str, str], str] = {
    ("look", "at"): "examine",
    ("look", "in"): "search",
    ("look", "inside"): "search",
    ("pick", "up"): "take",
    ("put", "down"): "drop",
    ("turn", "on"): "light",
    ("switch", "on"): "light",
    ("turn", "off"): "extinguish",
    ("switch", "off"): "extinguish",
}

# Words that move the player: "n" becomes verb "go" with object "n"
DIRECTION_WORDS = frozenset(
    {
        "n",
        "s",
        "e",
        "w",
        "ne",
        "nw",
        "se",
        "sw",
        "u",
        "d",
        "north",
        "south",
        "east",
        "west",
        "northeast",
        "northwest",
        "southeast",
        "southwest",
        "up",
        "down",
        "in",
        "out",
        "enter",
        "exit",
    }
)

VERB_SYNONYMS: dict[str, str] = {
    "take": "take",
    "get": "take",
    "grab": "take",
    "carry": "take",
    "drop": "drop",
    "discard": "drop",
    "open": "open",
    "close": "close",
    "shut": "close",
    "look": "look",
    "l": "look",
    "examine": "examine",
    "x": "examine",
    "inspect": "examine",
    "describe": "examine",
    "search": "search",
    "inventory": "inventory",
    "inv": "inventory",
    "i": "inventory",
    "go": "go",
    "walk": "go",
    "run": "go",
    "put": "put",
    "place": "put",
    "insert": "put",
    "read": "read",
    "light": "light",
    "extinguish": "extinguish",
    "douse": "extinguish",
    "unlock": "unlock",
    "lock": "lock",
    "score": "score",
    "verbose": "verbose",
    "brief": "brief",
    "wait": "wait",
    "z": "wait",
    "quit": "quit",
    "q": "quit",
    "again": "again",
    "g": "again",
    "oops": "oops",
    # Understood, but nothing in the world handles them
    "attack": "attack",
    "kill": "attack",
    "fight": "attack",
    "throw": "throw",
    "give": "give",
    "eat": "eat",
    "drink": "drink",
    "climb": "climb",
}


@dataclass(frozen=True)
class ParsedCommand:
    """The parser's output for one line of input."""

    verb: str | None = None
    direct_object: str | None = None
    indirect_object: str | None = None
    preposition: str | None = None
    is_valid: bool = True
    error_message: str | None = None

    @classmethod
    def valid(
        cls,
        verb: str,
        direct_object: str | None = None,
        indirect_object: str | None = None,
        preposition: str | None = None,
    ) -> "ParsedCommand":
        return cls(verb, direct_object, indirect_object, preposition)

    @classmethod
    def invalid(cls, message: str) -> "ParsedCommand":
        return cls(is_valid=False, error_message=message)

    def with_objects(
        self,
        direct_object: str | None = None,
        indirect_object: str | None = None,
    ) -> "ParsedCommand":
        """Rebuild with new object phrases, keeping verb and preposition."""
        return replace(
            self, direct_object=direct_object, indirect_object=indirect_object
        )


def _phrase(tokens: list[str]) -> str | None:
    return " ".join(tokens) or None


class Parser:
    """Static-grammar parser: verb, object phrase, preposition, object phrase."""

    def __init__(
        self,
        verbs: dict[str, str] | None = None,
        prepositions: frozenset[str] = PREPOSITIONS,
        multiword_verbs: dict[tuple[str, str], str] | None = None,
    ):
        self.verbs = VERB_SYNONYMS if verbs is None else verbs
        self.prepositions = prepositions
        self.multiword_verbs = (
            MULTIWORD_VERBS if multiword_verbs is None else multiword_verbs
        )

    def tokenize(self, text: str) -> list[str]:
        return [word for word in text.lower().split() if word not in ARTICLES]

    def parse(self, text: str | None) -> ParsedCommand:
        if text is None or not text.strip():
            return ParsedCommand.invalid(EMPTY_INPUT_MESSAGE)

        tokens = self.tokenize(text)
        if not tokens:
            # Only articles, e.g. "the"
            return ParsedCommand.invalid(EMPTY_INPUT_MESSAGE)

        if len(tokens) >= 2 and (tokens[0], tokens[1]) in self.multiword_verbs:
            verb = self.multiword_verbs[(tokens[0], tokens[1])]
            rest = tokens[2:]
        elif tokens[0] in DIRECTION_WORDS and tokens[0] not in self.verbs:
            return ParsedCommand.valid("go", tokens[0])
        elif tokens[0] in self.verbs:
            verb = self.verbs[tokens[0]]
            rest = tokens[1:]
        else:
            return ParsedCommand.invalid(
                f'I don\'t understand the word "{tokens[0]}".'
            )

        for index, word in enumerate(rest):
            if word in self.prepositions:
                return ParsedCommand.valid(
                    verb,
                    _phrase(rest[:index]),
                    _phrase(rest[index + 1 :]),
                    word,
                )
        return ParsedCommand.valid(verb, _phrase(rest))
