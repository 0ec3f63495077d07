"""Article helpers for narration."""

_USES_AN = frozenset({"honest", "hour", "honor", "heir"})
_USES_A = frozenset({"university", "unicorn", "uniform", "one"})


def with_indefinite_article(name: str) -> str:
    """Prefix "a" or "an": a lamp, an egg, an hour."""
    if not name or not name.strip():
        return name
    first_word = name.split()[0].lower()
    if first_word in _USES_AN:
        return f"an {name}"
    if first_word in _USES_A:
        return f"a {name}"
    article = "an" if first_word[0] in "aeiou" else "a"
    return f"{article} {name}"


def with_definite_article(name: str) -> str:
    if not name or not name.strip():
        return name
    return f"the {name}"


def join_names(names: list[str]) -> str:
    """Join names as English: x, x and y, x, y and z."""
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " and " + names[-1]
