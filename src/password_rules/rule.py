import logging
import re
from typing import Annotated, Optional

import annotated_types
import pydantic
from typing_extensions import Self

from .character_class import CharacterClass
from .period import Period
from .tokenizer import tokenize

__all__ = ("Rule", "MIN_MAX_LENGTH", "KNOWN_PROPERTIES")

logger = logging.getLogger(__name__)

# https://developer.apple.com/password-rules/ rejects max lengths below 4
MIN_MAX_LENGTH = 4

KNOWN_PROPERTIES = frozenset(
    ("minlength", "maxlength", "max-consecutive", "required", "x-expires-after")
)

INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")


def _parse_int(value: str) -> Optional[int]:
    if INTEGER_PATTERN.fullmatch(value) is None:
        return None
    try:
        return int(value)
    except ValueError:
        # more digits than sys.get_int_max_str_digits() allows
        logger.debug("integer value too long (%d chars)", len(value))
        return None


def _single(values: Optional[list[str]]) -> Optional[str]:
    if values is None or len(values) != 1:
        return None
    return values[0]


class Rule(pydantic.BaseModel):
    """
    A password policy parsed from the password rules mini-language.

    Every field is optional; a property that is missing or malformed in the source
    string leaves its field unset instead of failing the whole parse.

    Attributes:
        min_length: The minimum length of a valid password, in chars.
        max_length: The maximum length of a valid password, in chars. Never below
            4, and never below ``min_length``.
        max_consecutive: The maximum number of consecutive identical chars. With 3,
            the password ``aaaa`` is not valid.
        expires_after: How long a password stays valid. This is a non-standard
            extension (``x-expires-after``).
        required: Character classes a password must draw from. Each class is
            at-least-one-of, and all classes must be satisfied: ``required: lower;
            required: upper`` demands a lower-case *and* an upper-case char, while
            ``required: [!@]`` demands one of the two special chars.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    min_length: Optional[int] = None
    max_length: Optional[Annotated[int, annotated_types.Ge(MIN_MAX_LENGTH)]] = None
    max_consecutive: Optional[Annotated[int, annotated_types.Ge(1)]] = None
    expires_after: Optional[Period] = None
    required: Optional[tuple[CharacterClass, ...]] = None

    @pydantic.model_validator(mode="after")
    def lengths_ordered(self) -> Self:
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                "min_length (%d) must not exceed max_length (%d)"
                % (self.min_length, self.max_length)
            )
        return self

    @classmethod
    def from_string(cls, raw: str) -> "Rule":
        """
        Builds a rule from a password rules string, e.g.
        ``minlength: 8; maxlength: 64; required: lower; required: upper;``.

        Never raises on malformed input.
        """
        tokens = tokenize(raw)

        for name in tokens:
            if name not in KNOWN_PROPERTIES:
                logger.debug("ignoring unsupported property %r", name)

        min_length = cls._resolve_min_length(tokens.get("minlength"))
        max_length = cls._resolve_max_length(tokens.get("maxlength"))

        if min_length is not None and max_length is not None:
            if min_length > max_length:
                logger.debug(
                    "lowering minlength %d to match maxlength %d",
                    min_length,
                    max_length,
                )
                min_length = max_length

        return cls(
            min_length=min_length,
            max_length=max_length,
            max_consecutive=cls._resolve_max_consecutive(
                tokens.get("max-consecutive")
            ),
            expires_after=cls._resolve_expires_after(tokens.get("x-expires-after")),
            required=cls._resolve_required(tokens.get("required")),
        )

    @staticmethod
    def _resolve_min_length(values: Optional[list[str]]) -> Optional[int]:
        value = _single(values)
        if value is None:
            return None
        return _parse_int(value)

    @staticmethod
    def _resolve_max_length(values: Optional[list[str]]) -> Optional[int]:
        value = _single(values)
        if value is None:
            return None

        res = _parse_int(value)
        if res is not None and res < MIN_MAX_LENGTH:
            logger.debug("raising maxlength %d to %d", res, MIN_MAX_LENGTH)
            res = MIN_MAX_LENGTH
        return res

    @staticmethod
    def _resolve_max_consecutive(values: Optional[list[str]]) -> Optional[int]:
        # "If you have multiple max-consecutive properties in your rule, the
        # minimum value of the properties will be applied."
        candidates = [
            res for res in map(_parse_int, values or ()) if res is not None
        ]
        if not candidates:
            return None
        return max(min(candidates), 1)

    @staticmethod
    def _resolve_expires_after(values: Optional[list[str]]) -> Optional[Period]:
        value = _single(values)
        if value is None:
            return None
        return Period.try_parse(value)

    @staticmethod
    def _resolve_required(
        values: Optional[list[str]],
    ) -> Optional[tuple[CharacterClass, ...]]:
        if values is None:
            return None

        res = []
        for value in values:
            if (char_class := CharacterClass.try_parse(value)) is None:
                logger.debug("dropping required value %r", value)
                continue
            res.append(char_class)
        return tuple(res)
