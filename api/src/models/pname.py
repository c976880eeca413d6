"""
Request and response schemas for the name conversion endpoints.

The form endpoint (``/pname``) carries its inputs as form fields; the JSON
endpoint (``/api/generate``) uses camelCase field names on the wire.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from engine.src.casing import CasingStyle
from engine.src.converter import ConversionResult
from engine.src.dictionary import DictionaryFormat


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Form endpoint (/pname)
# ============================================================================


class ConversionItem(BaseModel):
    """One converted line of a batch."""

    ln: str = Field(..., description="Logical name as submitted")
    pn: str = Field(..., description="Physical name")
    desc: List[str] = Field(default_factory=list, description="Token mappings")

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionItem":
        return cls(ln=result.ln, pn=result.pn, desc=list(result.desc))


# ============================================================================
# JSON endpoint (/api/generate)
# ============================================================================


class GenerateRequest(_CamelModel):
    """Single-name generation request."""

    logical_name: str = Field(..., description="Logical name to convert")
    naming_convention: str = Field(
        default=CasingStyle.LOWER_CAMEL.value,
        description="Casing style literal, e.g. LOWER_CAMEL"
    )
    dictionary_data: Optional[str] = Field(
        default=None,
        description="Inline dictionary applied to this request only"
    )
    dictionary_format: str = Field(
        default=DictionaryFormat.CSV.value,
        description="Format of dictionary_data: CSV|TSV|JSON|YAML"
    )


class GenerateResponse(_CamelModel):
    """Generation result or error."""

    success: bool
    logical_name: Optional[str] = None
    physical_name: Optional[str] = None
    token_mappings: Optional[List[str]] = None
    error_message: Optional[str] = None

    @classmethod
    def from_result(cls, result: ConversionResult) -> "GenerateResponse":
        return cls(
            success=True,
            logical_name=result.ln,
            physical_name=result.pn,
            token_mappings=list(result.desc),
        )

    @classmethod
    def error(cls, message: str) -> "GenerateResponse":
        return cls(success=False, error_message=message)


class DictionaryInfo(_CamelModel):
    """Currently loaded dictionary."""

    loaded: bool
    entries: int = Field(..., ge=0)
    source: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str = Field(..., min_length=1)
    error_code: Optional[str] = None
