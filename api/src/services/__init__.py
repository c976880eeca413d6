"""Business logic services.

This package contains service classes that hold the state shared by the
API endpoints, such as the server-wide word dictionary.
"""

from api.src.services.dictionary_service import DictionaryService

__all__ = ["DictionaryService"]
