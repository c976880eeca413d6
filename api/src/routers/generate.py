"""
JSON generation API and dictionary management.

Provides REST API endpoints for:
- Converting a single logical name (optionally with an inline dictionary)
- Uploading a server-wide dictionary file
- Reloading the configured dictionary file
- Reporting the loaded dictionary
"""

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from api.src.dependencies import (
    get_conversion_metrics,
    get_current_dictionary,
    get_dictionary_service,
)
from api.src.middleware.csrf import verify_csrf
from api.src.models.pname import DictionaryInfo, ErrorResponse, GenerateRequest, GenerateResponse
from api.src.services.dictionary_service import DictionaryService
from engine.src.converter import convert_line, parse_casing_style
from engine.src.dictionary import WordDictionary
from engine.src.errors import DictionaryFormatError, InvalidCasingStyle
from shared.metrics import ConversionMetrics

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/generate",
    tags=["Generation"],
    dependencies=[Depends(verify_csrf)],
)


def _error(status_code: int, message: str) -> JSONResponse:
    body = GenerateResponse.error(message).model_dump(by_alias=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "",
    response_model=GenerateResponse,
    summary="Generate Physical Name",
    description="""
    Convert one logical name using the requested naming convention.

    An inline dictionary (``dictionaryData`` in ``dictionaryFormat``) is used
    for this request only; otherwise the server-wide dictionary applies.
    """,
    responses={
        400: {"model": GenerateResponse, "description": "Invalid request parameters"},
        500: {"model": GenerateResponse, "description": "Internal server error"},
    },
)
async def generate_physical_name(
    payload: GenerateRequest,
    dictionary: WordDictionary = Depends(get_current_dictionary),
    metrics: ConversionMetrics = Depends(get_conversion_metrics),
):
    """Convert a single logical name."""
    try:
        style = parse_casing_style(payload.naming_convention)
        inline = DictionaryService.parse_inline(payload.dictionary_data, payload.dictionary_format)
        result = convert_line(payload.logical_name, style, inline if inline is not None else dictionary)
    except InvalidCasingStyle as e:
        metrics.conversion_failures.labels(error_type=e.error_code).inc()
        logger.warning("generate_rejected", error=e.message)
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid parameter: {e.message}")
    except DictionaryFormatError as e:
        metrics.conversion_failures.labels(error_type=e.error_code).inc()
        logger.warning("generate_rejected", error=e.message)
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid dictionary: {e.message}")

    metrics.lines_converted.labels(style=style.value).inc()
    return GenerateResponse.from_result(result)


@router.post(
    "/dictionary",
    response_model=DictionaryInfo,
    summary="Upload Dictionary File",
    tags=["Dictionary Management"],
    responses={400: {"model": ErrorResponse, "description": "Invalid dictionary"}},
)
async def upload_dictionary(
    file: UploadFile = File(..., description="Dictionary file in CSV, TSV, JSON or YAML format"),
    dict_format: str = Form("CSV", alias="format"),
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionaryInfo:
    """Replace the server-wide dictionary with the uploaded file."""
    raw = await file.read()
    if not raw:
        logger.warning("dictionary_upload_rejected", reason="empty", filename=file.filename)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "No dictionary file provided", "error_code": "empty_upload"},
        )
    try:
        data = raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("dictionary_upload_rejected", reason="encoding", filename=file.filename)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Dictionary must be UTF-8 encoded", "error_code": "invalid_encoding"},
        )

    entries = service.replace(data, dict_format, source=file.filename or "upload")
    return DictionaryInfo(loaded=entries > 0, entries=entries, source=service.source)


@router.post(
    "/dictionary/reload",
    response_model=DictionaryInfo,
    summary="Reload Dictionary File",
    tags=["Dictionary Management"],
)
async def reload_dictionary(
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionaryInfo:
    """Re-read the dictionary file named in the configuration."""
    try:
        entries = service.reload()
    except DictionaryFormatError as e:
        logger.error("dictionary_reload_failed", path=service.path, error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": e.message, "error_code": e.error_code},
        )
    return DictionaryInfo(loaded=entries > 0, entries=entries, source=service.source)


@router.get(
    "/dictionary/info",
    response_model=DictionaryInfo,
    summary="Get Dictionary Information",
    tags=["Dictionary Management"],
)
async def dictionary_info(
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionaryInfo:
    """Report whether a dictionary is loaded and its size."""
    return DictionaryInfo(
        loaded=service.has_dictionary(),
        entries=len(service.current),
        source=service.source,
    )
