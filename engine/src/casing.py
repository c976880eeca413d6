"""Casing styles and their rendering rules.

Each style is described by a single row in ``_RULES``: the delimiter placed
between words, the letter-casing applied to every word, and an optional
override for the first word. Adding a style means adding an enum member and
one table row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional


def _upper(word: str) -> str:
    return word.upper()


def _lower(word: str) -> str:
    return word.lower()


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


@dataclass(frozen=True)
class CasingRule:
    """Rendering rule for one casing style."""

    delimiter: str
    word_case: Callable[[str], str]
    first_word_case: Optional[Callable[[str], str]] = None
    label: str = ""

    def apply(self, word: str, index: int) -> str:
        if index == 0 and self.first_word_case is not None:
            return self.first_word_case(word)
        return self.word_case(word)


class CasingStyle(str, Enum):
    """Supported identifier casing conventions."""

    UPPER_SNAKE = "UPPER_SNAKE"
    LOWER_SNAKE = "LOWER_SNAKE"
    UPPER_CAMEL = "UPPER_CAMEL"
    LOWER_CAMEL = "LOWER_CAMEL"
    UPPER_KEBAB = "UPPER_KEBAB"
    LOWER_KEBAB = "LOWER_KEBAB"

    @property
    def rule(self) -> CasingRule:
        return _RULES[self]

    @property
    def delimiter(self) -> str:
        return self.rule.delimiter

    @property
    def label(self) -> str:
        """Human readable label, e.g. ``lowerCamel`` or ``UPPER-KEBAB``."""
        return self.rule.label

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


_RULES: Dict[CasingStyle, CasingRule] = {
    CasingStyle.UPPER_SNAKE: CasingRule("_", _upper, label="UPPER_SNAKE"),
    CasingStyle.LOWER_SNAKE: CasingRule("_", _lower, label="lower_snake"),
    CasingStyle.UPPER_CAMEL: CasingRule("", _capitalize, label="UpperCamel"),
    CasingStyle.LOWER_CAMEL: CasingRule("", _capitalize, _lower, label="lowerCamel"),
    CasingStyle.UPPER_KEBAB: CasingRule("-", _upper, label="UPPER-KEBAB"),
    CasingStyle.LOWER_KEBAB: CasingRule("-", _lower, label="lower-kebab"),
}
