"""Line-oriented conversion of logical names into physical names.

Conversion runs in two independent passes: :func:`engine.src.tokenizer.tokenize`
produces the words of a line, :func:`render` re-serializes them under a
casing style. Batches are split on ``\\n`` and the output always has the same
number of lines, in the same order, as the input.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import structlog

from engine.src.casing import CasingStyle
from engine.src.dictionary import WordDictionary
from engine.src.errors import InvalidCasingStyle, MissingInput
from engine.src.tokenizer import Boundary, Word, tokenize

logger = structlog.get_logger(__name__)

StyleLike = Union[CasingStyle, str]


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting a single line."""

    ln: str
    pn: str
    desc: List[str] = field(default_factory=list)


def parse_casing_style(value: Optional[StyleLike], default: Optional[CasingStyle] = None) -> CasingStyle:
    """Resolve a casing style from its wire literal.

    Args:
        value: Enum member or literal such as ``"LOWER_CAMEL"``
        default: Style returned when ``value`` is None

    Returns:
        The matching CasingStyle

    Raises:
        InvalidCasingStyle: If ``value`` is not a known style, or is None
            and no default was given
    """
    if value is None:
        if default is None:
            raise InvalidCasingStyle(value, CasingStyle.values())
        return default
    if isinstance(value, CasingStyle):
        return value
    try:
        return CasingStyle(value)
    except ValueError:
        raise InvalidCasingStyle(value, CasingStyle.values()) from None


def split_lines(text: str) -> List[str]:
    """Split a batch on ``\\n``; a ``\\r`` before the break belongs to the break."""
    lines = text.split("\n")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def render(words: Sequence[Word], style: CasingStyle) -> str:
    """Render words under a casing style."""
    rule = style.rule
    parts: List[str] = []
    for index, word in enumerate(words):
        if parts and not word.attached:
            parts.append(rule.delimiter)
        parts.append(rule.apply(word.text, index))
    return "".join(parts)


def apply_dictionary(
    words: Sequence[Word], dictionary: Optional[WordDictionary]
) -> Tuple[List[Word], List[str]]:
    """Replace dictionary words by their physical words.

    Returns:
        Tuple of (resulting words, token mappings)
    """
    result: List[Word] = []
    mappings: List[str] = []
    for word in words:
        physical = dictionary.lookup(word.text) if dictionary else None
        replacement = [pw for entry in physical or () for pw in tokenize(entry)]
        if not replacement:
            result.append(word)
            mappings.append(f"{word.text}=*")
            continue

        for position, pw in enumerate(replacement):
            boundary = word.boundary if position == 0 else Boundary.DELIMITER
            result.append(Word(pw.text, boundary))
        mappings.append(f"{word.text}=>{' '.join(physical)}")
    return result, mappings


def convert_line(
    line: str,
    style: StyleLike,
    dictionary: Optional[WordDictionary] = None,
) -> ConversionResult:
    """Convert a single logical name."""
    style = parse_casing_style(style)
    if not line:
        return ConversionResult(ln=line, pn="", desc=[])

    words, desc = apply_dictionary(tokenize(line), dictionary)
    pname = render(words, style)
    logger.debug(
        "line_converted",
        logical_name=line,
        words=[w.text for w in words],
        physical_name=pname,
    )
    return ConversionResult(ln=line, pn=pname, desc=desc)


def convert_batch_detailed(
    text: Optional[str],
    style: StyleLike,
    dictionary: Optional[WordDictionary] = None,
) -> List[ConversionResult]:
    """Convert every line of a batch, keeping per-line details.

    Raises:
        MissingInput: If ``text`` is None
        InvalidCasingStyle: If ``style`` is unknown
    """
    if text is None:
        raise MissingInput("ln")
    style = parse_casing_style(style)
    results = [convert_line(line, style, dictionary) for line in split_lines(text)]
    logger.info("batch_converted", style=style.value, lines=len(results))
    return results


def convert_batch(
    text: Optional[str],
    style: StyleLike,
    dictionary: Optional[WordDictionary] = None,
) -> str:
    """Convert a newline-joined batch of logical names.

    Args:
        text: Logical names joined by ``\\n``; an empty string is a batch of
            one empty line
        style: Target casing style
        dictionary: Optional word dictionary

    Returns:
        Physical names joined by ``\\n``, one per input line
    """
    return "\n".join(r.pn for r in convert_batch_detailed(text, style, dictionary))
