import logging
from collections.abc import Iterator

__all__ = ("tokenize",)

logger = logging.getLogger(__name__)

PROPERTY_SEPARATOR = ";"
NAME_SEPARATOR = ":"
VALUE_SEPARATOR = ","
ESCAPE = "\\"


def _split(text: str, separator: str) -> Iterator[str]:
    """
    Splits ``text`` on ``separator``, ignoring separators that appear inside a
    bracket expression or right after a backslash within one.
    """
    start, in_brackets, escaped = 0, False, False

    for idx, char in enumerate(text):
        if escaped:
            escaped = False
        elif in_brackets:
            if char == ESCAPE:
                escaped = True
            elif char == "]":
                in_brackets = False
        elif char == "[":
            in_brackets = True
        elif char == separator:
            yield text[start:idx]
            start = idx + 1

    yield text[start:]


def tokenize(raw: str) -> dict[str, list[str]]:
    """
    Lexes a password rule string into an ordered multimap.

    Property names are lower-cased and every occurrence of a property contributes
    its values to the same entry, so ``max-consecutive: 3; max-consecutive: 5``
    becomes ``{"max-consecutive": ["3", "5"]}``. Malformed fragments (no colon,
    empty name, no values) are skipped, never raised.

    Example::

        >>> tokenize("minlength: 8; required: upper, [!@];")
        {'minlength': ['8'], 'required': ['upper', '[!@]']}
    """
    res: dict[str, list[str]] = {}

    for fragment in _split(raw, PROPERTY_SEPARATOR):
        name, sep, rest = fragment.partition(NAME_SEPARATOR)
        name = name.strip().lower()

        if not sep or not name:
            if fragment.strip():
                logger.debug("skipping malformed property %r", fragment)
            continue

        values = [
            value
            for value in (item.strip() for item in _split(rest, VALUE_SEPARATOR))
            if value
        ]
        if not values:
            logger.debug("skipping property %r without values", name)
            continue

        res.setdefault(name, []).extend(values)

    return res
