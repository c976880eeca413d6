"""Data models for the FastAPI service.

This package contains Pydantic models for request/response validation.
"""

from api.src.models.pname import (
    ConversionItem,
    DictionaryInfo,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
)

__all__ = [
    "ConversionItem",
    "DictionaryInfo",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
]
