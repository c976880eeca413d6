"""Name-casing conversion engine.

Turns free-form logical names (one per line) into physical names rendered
in one of the supported identifier casing conventions.
"""

from engine.src.casing import CasingStyle
from engine.src.converter import (
    ConversionResult,
    convert_batch,
    convert_batch_detailed,
    convert_line,
    parse_casing_style,
    render,
)
from engine.src.dictionary import DictionaryFormat, WordDictionary, load_dictionary
from engine.src.errors import (
    DictionaryFormatError,
    InvalidCasingStyle,
    MissingInput,
    PnameError,
)
from engine.src.tokenizer import Boundary, Word, tokenize

__version__ = "0.1.0"

__all__ = [
    "Boundary",
    "CasingStyle",
    "ConversionResult",
    "DictionaryFormat",
    "DictionaryFormatError",
    "InvalidCasingStyle",
    "MissingInput",
    "PnameError",
    "Word",
    "WordDictionary",
    "convert_batch",
    "convert_batch_detailed",
    "convert_line",
    "load_dictionary",
    "parse_casing_style",
    "render",
    "tokenize",
]
