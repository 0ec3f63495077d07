"""Command history and pronoun tracking for AGAIN, OOPS and "it"."""

from .parser import ParsedCommand

MAX_HISTORY = 100

PRONOUNS = frozenset({"it", "them"})


class CommandHistory:
    """Entered lines, oldest first, capped at MAX_HISTORY.

    Every line is kept so OOPS can fix a typo, but AGAIN only ever sees the
    last line the parser accepted.
    """

    def __init__(self, max_size: int = MAX_HISTORY):
        self.max_size = max_size
        self._lines: list[str] = []
        self._accepted: str | None = None

    def __len__(self) -> int:
        return len(self._lines)

    def add(self, line: str, accepted: bool = True) -> None:
        self._lines.append(line)
        if len(self._lines) > self.max_size:
            del self._lines[0]
        if accepted:
            self._accepted = line

    def accept(self, line: str) -> None:
        self._accepted = line

    def previous(self) -> str | None:
        """The last accepted line, for AGAIN."""
        return self._accepted

    def last_line(self) -> str | None:
        return self._lines[-1] if self._lines else None

    def last_word(self) -> str | None:
        line = self.last_line()
        if line is None:
            return None
        words = line.split()
        return words[-1] if words else None

    def replace_last_word(self, word: str) -> str | None:
        """Swap the last word of the last entered line; return the new line."""
        line = self.last_line()
        if line is None:
            return None
        words = line.split()
        if not words:
            return None
        words[-1] = word
        self._lines[-1] = " ".join(words)
        return self._lines[-1]

    def recent(self, count: int = 10) -> list[str]:
        return self._lines[-count:] if count > 0 else []

    def clear(self) -> None:
        self._lines.clear()
        self._accepted = None


class PronounTracker:
    """Remembers the last noun phrase that named a real object."""

    def __init__(self):
        self.referent: str | None = None

    def remember(self, phrase: str | None) -> None:
        if phrase and phrase not in PRONOUNS:
            self.referent = phrase

    def _swap(self, phrase: str | None) -> str | None:
        if phrase in PRONOUNS and self.referent is not None:
            return self.referent
        return phrase

    def resolve(self, parsed: ParsedCommand) -> ParsedCommand:
        """Replace "it"/"them" in either object slot with the referent."""
        direct = self._swap(parsed.direct_object)
        indirect = self._swap(parsed.indirect_object)
        if direct == parsed.direct_object and indirect == parsed.indirect_object:
            return parsed
        return parsed.with_objects(direct, indirect)
