"""SQLAlchemy-backed readers for nutrition aggregates.

Each call opens its own session so the service can run queries
concurrently.
"""

from datetime import date, datetime

from sqlalchemy import Date, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pantrywise.models import MealLog, PlannedMeal, UserPreference
from pantrywise.nutrition.schemas import DailyCalories, MealLogEntry


class MealLogRepository:
    """Meal log queries."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_by_user_and_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealLogEntry]:
        query = (
            select(MealLog)
            .where(MealLog.user_id == user_id)
            .where(MealLog.consumed_at >= start, MealLog.consumed_at <= end)
            .order_by(MealLog.consumed_at)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [MealLogEntry.model_validate(log) for log in result.scalars().all()]

    async def find_daily_calories(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[DailyCalories]:
        day = cast(MealLog.consumed_at, Date).label("day")
        query = (
            select(day, func.coalesce(func.sum(MealLog.calories), 0).label("calories"))
            .where(MealLog.user_id == user_id)
            .where(MealLog.consumed_at >= start, MealLog.consumed_at <= end)
            .group_by(day)
            .order_by(day)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [_daily(row.day, row.calories) for row in result]

    async def find_oldest_consumed_at(self, user_id: str) -> datetime | None:
        query = select(func.min(MealLog.consumed_at)).where(MealLog.user_id == user_id)
        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.scalar()


class PlannedMealRepository:
    """Planned meal queries."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_daily_calories(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[DailyCalories]:
        query = (
            select(
                PlannedMeal.planned_date.label("day"),
                func.coalesce(func.sum(PlannedMeal.calories), 0).label("calories"),
            )
            .where(PlannedMeal.user_id == user_id)
            .where(PlannedMeal.planned_date >= start.date(), PlannedMeal.planned_date <= end.date())
            .group_by(PlannedMeal.planned_date)
            .order_by(PlannedMeal.planned_date)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [_daily(row.day, row.calories) for row in result]


class UserPreferenceRepository:
    """User preference queries."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_calorie_goal(self, user_id: str) -> int | None:
        query = select(UserPreference.caloric_goal).where(UserPreference.user_id == user_id)
        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()


def _daily(day: date | datetime | str, calories: int | None) -> DailyCalories:
    if isinstance(day, datetime):
        day = day.date()
    elif isinstance(day, str):
        day = date.fromisoformat(day)
    return DailyCalories(date=day, calories=int(calories or 0))
