"""API route for nutrition aggregates."""

from datetime import date, datetime, time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from pantrywise.logging_config import get_logger
from pantrywise.nutrition.schemas import NutritionAggregates
from pantrywise.nutrition.service import AggregateOptions, NutritionService
from pantrywise.routers.dependencies import get_current_user_id, get_nutrition_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/nutrition", tags=["nutrition"])


@router.get("/aggregates", response_model=NutritionAggregates)
async def get_aggregates(
    reference_date: Annotated[
        date | None, Query(alias="date", description="Day to report on (default today)")
    ] = None,
    goal: Annotated[int | None, Query(ge=0, description="Calorie goal override")] = None,
    tolerance: Annotated[float | None, Query(ge=0, le=100)] = None,
    window: Annotated[int | None, Query(ge=1, le=365, description="Adherence window")] = None,
    user_id: str = Depends(get_current_user_id),
    service: NutritionService = Depends(get_nutrition_service),
) -> NutritionAggregates:
    """Get today's and this week's calories, goal streaks and adherence."""
    options = AggregateOptions(
        reference_date=datetime.combine(reference_date, time()) if reference_date else None,
        goal_calories=goal,
        tolerance_percent=tolerance,
        adherence_window_days=window,
    )
    try:
        return await service.get_aggregates(user_id, options)
    except SQLAlchemyError as e:
        logger.error(f"Nutrition aggregates failed for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Nutrition data is temporarily unavailable",
        ) from e
