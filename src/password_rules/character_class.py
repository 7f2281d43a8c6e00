import functools
import logging
import sys
from collections.abc import Callable
from typing import NamedTuple, Optional

import pydantic

__all__ = ("CharacterClass", "NAMED_CLASSES")

logger = logging.getLogger(__name__)

ASCII_PRINTABLE = range(0x20, 0x7F)
ALL_CODE_POINTS = range(sys.maxunicode + 1)


class NamedClass(NamedTuple):
    code_points: range
    predicate: Callable[[str], bool]


# https://developer.apple.com/password-rules/
NAMED_CLASSES: dict[str, NamedClass] = {
    "upper": NamedClass(ASCII_PRINTABLE, lambda char: "A" <= char <= "Z"),
    "lower": NamedClass(ASCII_PRINTABLE, lambda char: "a" <= char <= "z"),
    "digit": NamedClass(ASCII_PRINTABLE, lambda char: "0" <= char <= "9"),
    "special": NamedClass(ASCII_PRINTABLE, lambda char: not char.isalnum()),
    "ascii-printable": NamedClass(ASCII_PRINTABLE, lambda char: True),
    "unicode": NamedClass(ALL_CODE_POINTS, str.isprintable),
}


class CharacterClass(pydantic.BaseModel):
    """
    A set of characters that a ``required`` (or ``allowed``) property refers to.

    A password satisfies the class when it contains at least one of the
    ``included`` characters.

    Attributes:
        name: The specifier the class was parsed from, e.g. ``lower`` or ``[!@]``.
        included: The member characters, unique and in a deterministic order.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    included: tuple[str, ...]

    @functools.cached_property
    def members(self) -> frozenset[str]:
        return frozenset(self.included)

    def __contains__(self, char: object) -> bool:
        return char in self.members

    @classmethod
    def try_parse(cls, spec: str) -> Optional["CharacterClass"]:
        """
        Parses a class specifier, returning ``None`` when it is neither a named
        class nor a bracket expression. An empty bracket expression yields an
        empty class, not ``None``.

        Inside brackets every character is literal (``-`` included, there are no
        ranges) and a backslash takes the following character literally.

        Example::

            >>> CharacterClass.try_parse("[-!]").included
            ('-', '!')
            >>> CharacterClass.try_parse("asdf") is None
            True
        """
        if spec in NAMED_CLASSES:
            return _resolve_named_class(spec)

        if spec.startswith("[") and spec.endswith("]") and len(spec) >= 2:
            return cls(name=spec, included=tuple(_scan_bracket_body(spec[1:-1])))

        logger.debug("%r is not a character class", spec)
        return None


def _scan_bracket_body(body: str) -> dict[str, None]:
    chars: dict[str, None] = {}
    escaped = False

    for char in body:
        if not escaped and char == "\\":
            escaped = True
            continue
        escaped = False
        chars.setdefault(char)

    if escaped:
        # dangling backslash right before the closing bracket
        chars.setdefault("\\")

    return chars


@functools.cache
def _resolve_named_class(name: str) -> CharacterClass:
    code_points, predicate = NAMED_CLASSES[name]
    included = tuple(char for char in map(chr, code_points) if predicate(char))
    logger.debug("resolved named class %r with %d members", name, len(included))
    return CharacterClass.model_construct(name=name, included=included)
