__all__ = (
    "CharacterClass",
    "Period",
    "PeriodUnit",
    "Rule",
    "tokenize",
)
__version__ = "0.1.0"

from .character_class import CharacterClass
from .period import Period, PeriodUnit
from .rule import Rule
from .tokenizer import tokenize
