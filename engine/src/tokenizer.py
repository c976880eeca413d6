"""Word tokenizer for logical names.

A line is scanned once. Words are separated by explicit delimiters
(``_``, ``-`` and whitespace) and by case transitions:

- lowercase followed by uppercase (``userName`` -> ``user`` / ``Name``)
- letter followed by digit (``id2`` -> ``id`` / ``2``)
- digit followed by letter (``md5sum`` -> ``md`` / ``5`` / ``sum``)
- inside a chunk that also holds lowercase letters, every capital
  (``pointXY`` -> ``point`` / ``X`` / ``Y``); a chunk with no lowercase
  letter keeps its capitals together (``HTTP server`` -> ``HTTP`` / ``server``)

A chunk is the text between two explicit delimiters.

Every word records how it was separated from the previous one so that the
renderer can keep digit suffixes attached (``id2`` stays ``id2``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

DELIMITERS = frozenset("_-")


class Boundary(str, Enum):
    """How a word is separated from the word before it."""

    START = "start"
    DELIMITER = "delimiter"
    TRANSITION = "transition"


@dataclass(frozen=True)
class Word:
    """A single word-token with its original characters."""

    text: str
    boundary: Boundary = Boundary.START

    @property
    def is_numeric(self) -> bool:
        return self.text.isdigit()

    @property
    def attached(self) -> bool:
        """Digit runs split off a preceding letter are rendered without a delimiter."""
        return self.boundary is Boundary.TRANSITION and self.is_numeric


def is_delimiter(ch: str) -> bool:
    return ch in DELIMITERS or ch.isspace()


def _starts_word(prev: str, ch: str, mixed_case: bool) -> bool:
    if ch.isupper() and (prev.islower() or (mixed_case and prev.isupper())):
        return True
    if prev.isalpha() and ch.isdigit():
        return True
    if prev.isdigit() and ch.isalpha():
        return True
    return False


def _chunk_has_lower(line: str, start: int) -> bool:
    for ch in line[start:]:
        if is_delimiter(ch):
            return False
        if ch.islower():
            return True
    return False


def tokenize(line: str) -> List[Word]:
    """Split one logical name into words.

    Args:
        line: A single line of input (no newline characters)

    Returns:
        Ordered words; empty when the line is empty or only delimiters
    """
    words: List[Word] = []
    start: Optional[int] = None
    boundary = Boundary.START
    mixed_case = False

    for index, ch in enumerate(line):
        if is_delimiter(ch):
            if start is not None:
                words.append(Word(line[start:index], boundary))
                start = None
            if words:
                boundary = Boundary.DELIMITER
            continue

        if start is None:
            start = index
            mixed_case = _chunk_has_lower(line, index)
            continue

        if _starts_word(line[index - 1], ch, mixed_case):
            words.append(Word(line[start:index], boundary))
            start = index
            boundary = Boundary.TRANSITION

    if start is not None:
        words.append(Word(line[start:], boundary))

    return words
