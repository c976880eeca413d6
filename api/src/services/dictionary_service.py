"""
Holder for the server-wide word dictionary.

The dictionary is replaced as a whole; a conversion that already obtained the
current dictionary keeps using it even if an upload replaces it meanwhile.
"""

import structlog
from typing import Optional, Union

from engine.src.dictionary import (
    DictionaryFormat,
    WordDictionary,
    load_dictionary,
    load_dictionary_file,
)
from engine.src.errors import DictionaryFormatError
from shared.metrics import ConversionMetrics
from shared.tracing import trace_function

logger = structlog.get_logger(__name__)


class DictionaryService:
    """Loads, swaps and reports the active word dictionary."""

    def __init__(
        self,
        path: Optional[str] = None,
        fmt: Optional[str] = None,
        delimiter: Optional[str] = None,
        encoding: str = "utf-8",
        metrics: Optional[ConversionMetrics] = None,
    ):
        self.path = path
        self.fmt = fmt
        self.delimiter = delimiter
        self.encoding = encoding
        self.metrics = metrics
        self._dictionary = WordDictionary()
        self._source: Optional[str] = None

    @property
    def current(self) -> WordDictionary:
        return self._dictionary

    @property
    def source(self) -> Optional[str]:
        return self._source

    def has_dictionary(self) -> bool:
        return len(self._dictionary) > 0

    def _swap(self, dictionary: WordDictionary, source: str) -> int:
        self._dictionary = dictionary
        self._source = source
        if self.metrics:
            self.metrics.dictionary_entries.set(len(dictionary))
        logger.info("dictionary_loaded", source=source, entries=len(dictionary))
        return len(dictionary)

    @trace_function("pname.dictionary_reload")
    def reload(self) -> int:
        """
        Re-read the configured dictionary file.

        Returns:
            Number of entries loaded (0 when no path is configured)

        Raises:
            DictionaryFormatError: If the file is missing or malformed
        """
        if not self.path:
            logger.info("dictionary_not_configured")
            return self._swap(WordDictionary(), "none")
        dictionary = load_dictionary_file(
            self.path,
            self.fmt,
            delimiter=self.delimiter,
            encoding=self.encoding,
        )
        return self._swap(dictionary, self.path)

    def replace(self, data: str, fmt: Union[DictionaryFormat, str], source: str = "upload") -> int:
        """
        Replace the dictionary with uploaded contents.

        Raises:
            DictionaryFormatError: If the data is malformed
        """
        dictionary = load_dictionary(data, fmt, delimiter=self.delimiter)
        return self._swap(dictionary, source)

    @staticmethod
    def parse_inline(data: Optional[str], fmt: Union[DictionaryFormat, str]) -> Optional[WordDictionary]:
        """Parse a per-request dictionary; None when no data was sent."""
        if data is None or not data.strip():
            return None
        try:
            return load_dictionary(data, fmt)
        except DictionaryFormatError:
            logger.warning("inline_dictionary_rejected", format=str(fmt))
            raise
