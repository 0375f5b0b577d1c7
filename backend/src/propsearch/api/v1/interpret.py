"""Edge gateway endpoint: free-text query in, structured filters out."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from propsearch.ai.errors import InterpretError
from propsearch.ai.extractor import FilterExtractor
from propsearch.api.rate_limit import limiter
from propsearch.logging_config import get_logger
from propsearch.settings import settings

logger = get_logger(__name__)

router = APIRouter(tags=["ai"])

_extractor: FilterExtractor | None = None


def get_extractor() -> FilterExtractor:
    """Shared extractor, built lazily from settings."""
    global _extractor
    if _extractor is None:
        _extractor = FilterExtractor()
    return _extractor


# ==================== MODELS ====================


class InterpretSearchRequest(BaseModel):
    """Query to interpret."""

    query: str = Field(..., max_length=settings.interpret_max_query_length)


class InterpretSearchResponse(BaseModel):
    """Extracted filters, camelCase keys, absent fields omitted."""

    filters: dict[str, Any]


class ErrorResponse(BaseModel):
    """Error body. ``message`` and ``suggestion`` only for invalid_query."""

    error: str
    message: str | None = None
    suggestion: str | None = None


# ==================== ENDPOINTS ====================


@router.post(
    "/interpret-search",
    response_model=InterpretSearchResponse,
    responses={
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.interpret_rate_limit)
async def interpret_search(
    request: Request,
    body: InterpretSearchRequest,
    extractor: FilterExtractor = Depends(get_extractor),
):
    """Interpret a natural language property search.

    Converts queries like:
    - "Apartamento de 2 habitaciones cerca del metro"
    - "Casa en Envigado, máximo 3 millones"
    - "Bodega comercial a 10 km de Itagüí"

    Into ``{"filters": {...}}``. Queries with no property-search intent get
    422 ``invalid_query`` with a message and a suggestion.
    """
    query = body.query.strip()
    if not query:
        return JSONResponse(status_code=400, content={"error": "query is required"})

    try:
        filters = await extractor.extract(query)
    except InterpretError as e:
        logger.warning("interpret_search_failed", error=e.error_code, status=e.status_code)
        return JSONResponse(status_code=e.status_code, content=e.to_payload())

    return InterpretSearchResponse(filters=filters.to_dict())
