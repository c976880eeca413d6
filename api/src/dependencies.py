"""
FastAPI dependency injection for settings, services and metrics.

Shared resources are created once per application in ``create_app`` and
stored on ``app.state``; the dependencies below expose them to routes so
tests can build isolated applications.
"""

import structlog
from fastapi import Request

from api.src.config import Settings
from api.src.services.dictionary_service import DictionaryService
from engine.src.dictionary import WordDictionary
from shared.metrics import ConversionMetrics

logger = structlog.get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_dictionary_service(request: Request) -> DictionaryService:
    """The application's dictionary holder."""
    return request.app.state.dictionary_service


def get_current_dictionary(request: Request) -> WordDictionary:
    """
    Snapshot of the active dictionary for the duration of one request.

    Returns:
        WordDictionary (possibly empty)
    """
    return request.app.state.dictionary_service.current


def get_conversion_metrics(request: Request) -> ConversionMetrics:
    """Conversion metrics registered for this application."""
    return request.app.state.conversion_metrics
