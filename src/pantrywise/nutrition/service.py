"""Nutrition aggregates: today, this week, streaks and adherence."""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from pantrywise.logging_config import get_logger
from pantrywise.nutrition.calculations import (
    DEFAULT_ADHERENCE_WINDOW_DAYS,
    DEFAULT_TOLERANCE_PERCENT,
    adherence_range,
    day_range,
    end_of_day,
    has_goal,
    start_of_day,
    summarize_adherence,
    summarize_day,
    summarize_streak,
    summarize_week,
    week_range,
)
from pantrywise.nutrition.schemas import (
    DailyCalories,
    MealLogEntry,
    NutritionAdherence,
    NutritionAggregates,
    NutritionDaySummary,
    NutritionStreak,
    NutritionWeekSummary,
)

logger = get_logger(__name__)


# =============================================================================
# Repository interfaces
# =============================================================================


class MealLogReader(Protocol):
    """Read access to logged meals."""

    async def find_by_user_and_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealLogEntry]:
        """Return meal logs consumed within [start, end], oldest first."""

    async def find_daily_calories(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[DailyCalories]:
        """Return consumed calories grouped by day within [start, end]."""

    async def find_oldest_consumed_at(self, user_id: str) -> datetime | None:
        """Return when the user's earliest meal was logged."""


class PlannedMealReader(Protocol):
    """Read access to planned meals."""

    async def find_daily_calories(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[DailyCalories]:
        """Return planned calories grouped by day within [start, end]."""


class PreferencesReader(Protocol):
    """Read access to user preferences."""

    async def find_calorie_goal(self, user_id: str) -> int | None:
        """Return the user's stored daily calorie goal."""


# =============================================================================
# Service
# =============================================================================


@dataclass
class AggregateOptions:
    """Per-request overrides for aggregate computation."""

    reference_date: datetime | None = None
    goal_calories: int | None = None
    tolerance_percent: float | None = None
    adherence_window_days: int | None = None


class NutritionService:
    """Combine meal logs, planned meals and the calorie goal into aggregates."""

    def __init__(
        self,
        meal_logs: MealLogReader,
        planned_meals: PlannedMealReader,
        preferences: PreferencesReader,
        tolerance_percent: float = DEFAULT_TOLERANCE_PERCENT,
        adherence_window_days: int = DEFAULT_ADHERENCE_WINDOW_DAYS,
    ):
        self.meal_logs = meal_logs
        self.planned_meals = planned_meals
        self.preferences = preferences
        self.tolerance_percent = tolerance_percent
        self.adherence_window_days = adherence_window_days

    async def get_aggregates(
        self,
        user_id: str,
        options: AggregateOptions | None = None,
    ) -> NutritionAggregates:
        options = options or AggregateOptions()
        reference = options.reference_date or datetime.now()
        tolerance = (
            options.tolerance_percent
            if options.tolerance_percent is not None
            else self.tolerance_percent
        )
        window_days = options.adherence_window_days or self.adherence_window_days
        goal = await self.resolve_calorie_goal(user_id, options.goal_calories)

        today, week, streak, adherence = await asyncio.gather(
            self.get_daily_summary(user_id, reference, goal),
            self.get_weekly_summary(user_id, reference, goal),
            self.get_streak(user_id, reference, goal, tolerance),
            self.get_adherence(user_id, reference, goal, window_days, tolerance),
        )

        logger.debug(
            f"Nutrition aggregates for user {user_id}: goal={goal}, "
            f"streak={streak.current_days}, adherence={adherence.rate_percent}%"
        )
        return NutritionAggregates(today=today, week=week, streak=streak, adherence=adherence)

    async def resolve_calorie_goal(self, user_id: str, override: int | None = None) -> int | None:
        """An explicit goal wins over the stored preference."""
        if override is not None:
            return override
        return await self.preferences.find_calorie_goal(user_id)

    async def get_daily_summary(
        self, user_id: str, reference: datetime, goal: int | None
    ) -> NutritionDaySummary:
        start, end = day_range(reference)
        entries = await self.meal_logs.find_by_user_and_range(user_id, start, end)
        return summarize_day(start.date(), entries, goal)

    async def get_weekly_summary(
        self, user_id: str, reference: datetime, goal: int | None
    ) -> NutritionWeekSummary:
        start, end = week_range(reference)
        consumed, planned = await asyncio.gather(
            self.meal_logs.find_daily_calories(user_id, start, end),
            self.planned_meals.find_daily_calories(user_id, start, end),
        )
        return summarize_week(start.date(), consumed, planned, goal)

    async def get_streak(
        self, user_id: str, reference: datetime, goal: int | None, tolerance_percent: float
    ) -> NutritionStreak:
        if not has_goal(goal):
            return NutritionStreak()

        oldest = await self.meal_logs.find_oldest_consumed_at(user_id)
        if oldest is None:
            return NutritionStreak()

        daily = await self.meal_logs.find_daily_calories(
            user_id, start_of_day(oldest), end_of_day(reference)
        )
        return summarize_streak(daily, reference.date(), goal, tolerance_percent)

    async def get_adherence(
        self,
        user_id: str,
        reference: datetime,
        goal: int | None,
        window_days: int,
        tolerance_percent: float,
    ) -> NutritionAdherence:
        if not has_goal(goal):
            return NutritionAdherence(window_days=window_days)

        start, end = adherence_range(reference, window_days)
        daily = await self.meal_logs.find_daily_calories(user_id, start, end)
        return summarize_adherence(daily, window_days, goal, tolerance_percent)
