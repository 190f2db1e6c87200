"""API route for global search."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from pantrywise.config import Settings
from pantrywise.logging_config import get_logger
from pantrywise.routers.dependencies import (
    get_current_user_id,
    get_search_service,
    get_settings,
)
from pantrywise.search.schemas import GlobalSearchResponse
from pantrywise.search.service import GlobalSearchService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/search", tags=["search"])

MIN_LIMIT = 1
MAX_LIMIT = 10


def clamp_limit(limit: int | None, default: int) -> int:
    """Clamp a requested per-group limit into the supported range."""
    if limit is None:
        limit = default
    return max(MIN_LIMIT, min(MAX_LIMIT, limit))


@router.get("", response_model=GlobalSearchResponse)
async def search(
    q: Annotated[str, Query(description="Search text")] = "",
    limit: Annotated[int | None, Query(description="Results per group (1-10)")] = None,
    user_id: str = Depends(get_current_user_id),
    service: GlobalSearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
) -> GlobalSearchResponse:
    """Search recipes, cupboard items and receipts in one request."""
    limit_per_group = clamp_limit(limit, settings.search_default_limit)
    try:
        return await service.search(user_id, q, limit_per_group)
    except SQLAlchemyError as e:
        logger.error(f"Search failed for query '{q}': {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search is temporarily unavailable",
        ) from e
