"""
Form-based conversion endpoint used by the browser front-ends.

``POST {contextRoot}/pname?tsv`` answers with the converted batch as plain
text; ``POST {contextRoot}/pname`` answers with per-line JSON details.
"""

import time
import structlog
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import FormData

from api.src.config import Settings
from api.src.dependencies import (
    get_app_settings,
    get_conversion_metrics,
    get_current_dictionary,
)
from api.src.middleware.csrf import verify_csrf
from api.src.models.pname import ConversionItem, ErrorResponse
from engine.src.casing import CasingStyle
from engine.src.converter import ConversionResult, convert_batch_detailed, parse_casing_style, split_lines
from engine.src.dictionary import WordDictionary
from engine.src.errors import MissingInput
from shared.metrics import ConversionMetrics
from shared.tracing import trace_function

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["Conversion"],
    dependencies=[Depends(verify_csrf)],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid casing style or missing input"},
        403: {"model": ErrorResponse, "description": "CSRF token rejected"},
        413: {"model": ErrorResponse, "description": "Too many lines"},
    },
)


@trace_function("pname.convert_batch")
def run_conversion(
    ln: Optional[str],
    style_value: Optional[str],
    dictionary: WordDictionary,
    settings: Settings,
    metrics: ConversionMetrics,
) -> List[ConversionResult]:
    """
    Validate the form inputs and convert the whole batch.

    Raises:
        MissingInput: If ``ln`` was not submitted
        InvalidCasingStyle: If ``type`` is not a known style
        HTTPException: 413 when the batch exceeds ``max_lines``
    """
    if ln is None:
        raise MissingInput("ln")
    style = parse_casing_style(style_value, default=CasingStyle.UPPER_SNAKE)

    line_count = len(split_lines(ln))
    if line_count > settings.max_lines:
        logger.warning("batch_too_large", lines=line_count, max_lines=settings.max_lines)
        metrics.conversion_failures.labels(error_type="batch_too_large").inc()
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"At most {settings.max_lines} lines per request",
        )

    start_time = time.perf_counter()
    results = convert_batch_detailed(ln, style, dictionary)
    metrics.conversion_duration.labels(style=style.value).observe(time.perf_counter() - start_time)
    metrics.lines_converted.labels(style=style.value).inc(len(results))
    metrics.batch_lines.observe(len(results))
    return results


def _form_text(form: FormData, name: str) -> Optional[str]:
    value = form.get(name)
    return value if isinstance(value, str) else None


@router.post(
    "/pname",
    response_model=None,
    summary="Convert logical names",
    description="""
    Convert a newline-separated batch of logical names.

    **Form fields:**
    - ln: logical names joined by newlines (required, may be empty)
    - type: casing style (UPPER_SNAKE, LOWER_SNAKE, UPPER_CAMEL, LOWER_CAMEL,
      UPPER_KEBAB, LOWER_KEBAB); UPPER_SNAKE when omitted

    **Query flags:**
    - tsv: answer with the physical names as plain text, one per line

    Without ``tsv`` the answer is a JSON list of ``{ln, pn, desc}``.
    """,
    responses={
        200: {
            "description": "Converted batch",
            "content": {
                "text/plain": {"example": "UserName\nUserId"},
                "application/json": {"example": [{"ln": "user_name", "pn": "UserName", "desc": ["user=*", "name=*"]}]},
            },
        }
    },
)
async def generate(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    dictionary: WordDictionary = Depends(get_current_dictionary),
    metrics: ConversionMetrics = Depends(get_conversion_metrics),
):
    """Convert the submitted batch."""
    # Read the raw form: an empty ln is valid input, an absent one is not.
    form = await request.form()
    ln = _form_text(form, "ln")
    style_value = _form_text(form, "type")
    results = run_conversion(ln, style_value, dictionary, settings, metrics)

    if "tsv" in request.query_params:
        return PlainTextResponse("\n".join(r.pn for r in results))

    return JSONResponse(
        content=[ConversionItem.from_result(r).model_dump() for r in results]
    )
