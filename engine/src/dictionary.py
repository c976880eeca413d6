"""Word dictionary mapping logical words to physical words.

Supported formats:

- CSV / TSV: ``logical,physical`` rows, the physical column holding one or
  more words separated by a delimiter (whitespace by default)
- JSON: ``{"cust": ["customer"], "id": "identifier"}``
- YAML: same shape as JSON

Blank keys and physical words made only of delimiters are dropped; CSV/TSV rows with fewer than
two columns are skipped.
"""

import csv
import io
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

import structlog
import yaml

from engine.src.errors import DictionaryFormatError
from engine.src.tokenizer import is_delimiter

logger = structlog.get_logger(__name__)


class DictionaryFormat(str, Enum):
    """Supported dictionary serializations."""

    CSV = "CSV"
    TSV = "TSV"
    JSON = "JSON"
    YAML = "YAML"

    @classmethod
    def parse(cls, value: Union["DictionaryFormat", str]) -> "DictionaryFormat":
        if isinstance(value, DictionaryFormat):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise DictionaryFormatError(f"Unsupported dictionary format: {value!r}") from None

    @classmethod
    def from_path(cls, path: Path) -> "DictionaryFormat":
        suffix = path.suffix.lower()
        if suffix == ".tsv":
            return cls.TSV
        if suffix == ".json":
            return cls.JSON
        if suffix in (".yaml", ".yml"):
            return cls.YAML
        return cls.CSV


class WordDictionary(Mapping[str, List[str]]):
    """Immutable, case-insensitive word dictionary."""

    def __init__(self, entries: Optional[Mapping[str, List[str]]] = None):
        self._entries: Dict[str, List[str]] = {}
        for key, value in (entries or {}).items():
            self._entries[key.lower()] = list(value)

    def lookup(self, word: str) -> Optional[List[str]]:
        return self._entries.get(word.lower())

    def __getitem__(self, key: str) -> List[str]:
        return self._entries[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"WordDictionary({len(self)} entries)"


def _clean_words(words: List[Any]) -> List[str]:
    cleaned = (str(w).strip() for w in words if w is not None)
    return [w for w in cleaned if not all(is_delimiter(ch) for ch in w)]


def _load_delimited(data: str, dialect: str, delimiter: Optional[str], with_header: bool) -> Dict[str, List[str]]:
    entries: Dict[str, List[str]] = {}
    reader = csv.reader(io.StringIO(data), dialect=dialect)
    try:
        for row_number, row in enumerate(reader):
            if with_header and row_number == 0:
                continue
            if len(row) < 2:
                continue
            key = row[0].strip()
            words = _clean_words(row[1].split(delimiter) if delimiter else row[1].split())
            if key and words:
                entries[key] = words
    except csv.Error as e:
        raise DictionaryFormatError(f"Failed to parse {dialect} dictionary: {e}") from e
    return entries


def _load_mapping(raw: Any, fmt: DictionaryFormat) -> Dict[str, List[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DictionaryFormatError(f"{fmt.value} dictionary must be a mapping, got {type(raw).__name__}")

    entries: Dict[str, List[str]] = {}
    for key, value in raw.items():
        if key is None or not str(key).strip():
            continue
        if isinstance(value, str):
            words = _clean_words([value])
        elif isinstance(value, list):
            words = _clean_words(value)
        else:
            raise DictionaryFormatError(
                f"{fmt.value} dictionary value for {key!r} must be a string or list"
            )
        if words:
            entries[str(key).strip()] = words
    return entries


def load_dictionary(
    data: str,
    fmt: Union[DictionaryFormat, str] = DictionaryFormat.CSV,
    delimiter: Optional[str] = None,
    with_header: bool = False,
) -> WordDictionary:
    """Parse dictionary text.

    Args:
        data: Dictionary contents
        fmt: Serialization format
        delimiter: Separator between physical words in CSV/TSV (whitespace if None)
        with_header: Skip the first CSV/TSV row

    Returns:
        WordDictionary (empty for blank input)

    Raises:
        DictionaryFormatError: If the data cannot be parsed
    """
    fmt = DictionaryFormat.parse(fmt)
    if data is None or not data.strip():
        return WordDictionary()

    if fmt is DictionaryFormat.CSV:
        entries = _load_delimited(data, "excel", delimiter, with_header)
    elif fmt is DictionaryFormat.TSV:
        entries = _load_delimited(data, "excel-tab", delimiter, with_header)
    elif fmt is DictionaryFormat.JSON:
        try:
            raw = json.loads(data)
        except json.JSONDecodeError as e:
            raise DictionaryFormatError(f"Failed to parse JSON dictionary: {e}") from e
        entries = _load_mapping(raw, fmt)
    else:
        try:
            raw = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DictionaryFormatError(f"Failed to parse YAML dictionary: {e}") from e
        entries = _load_mapping(raw, fmt)

    logger.info("dictionary_parsed", format=fmt.value, entries=len(entries))
    return WordDictionary(entries)


def load_dictionary_file(
    path: Union[str, Path],
    fmt: Optional[Union[DictionaryFormat, str]] = None,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
    with_header: bool = False,
) -> WordDictionary:
    """Load a dictionary from disk, inferring the format from the suffix when not given."""
    path = Path(path)
    resolved = DictionaryFormat.parse(fmt) if fmt else DictionaryFormat.from_path(path)
    try:
        data = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise DictionaryFormatError(f"Failed to read dictionary {path}: {e}") from e
    return load_dictionary(data, resolved, delimiter=delimiter, with_header=with_header)
