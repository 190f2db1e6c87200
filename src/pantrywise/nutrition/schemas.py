"""Nutrition aggregate data schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class MealLogEntry(BaseModel):
    """A logged meal."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    calories: int
    consumed_at: datetime
    meal_type: str | None = None


class DailyCalories(BaseModel):
    """Calorie total for one calendar day."""

    date: date
    calories: int


class NutritionDaySummary(BaseModel):
    date: date
    goal_calories: int | None
    consumed_calories: int
    remaining_calories: int | None
    adherence_percent: int | None
    entries: list[MealLogEntry] = Field(default_factory=list)


class NutritionWeekDay(BaseModel):
    date: date
    planned_calories: int = 0
    consumed_calories: int = 0


class NutritionWeekSummary(BaseModel):
    start_date: date
    end_date: date
    goal_calories: int | None
    planned_calories: int
    consumed_calories: int
    remaining_calories: int | None
    adherence_percent: int | None
    daily: list[NutritionWeekDay]


class NutritionStreak(BaseModel):
    current_days: int = 0
    best_days: int = 0
    last_met_date: date | None = None


class NutritionAdherence(BaseModel):
    window_days: int
    days_on_target: int = 0
    total_tracked_days: int = 0
    rate_percent: int = 0


class NutritionAggregates(BaseModel):
    """Today, week, streak and adherence in one payload."""

    today: NutritionDaySummary
    week: NutritionWeekSummary
    streak: NutritionStreak
    adherence: NutritionAdherence
