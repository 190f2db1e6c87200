"""Calorie goal tracking: daily and weekly summaries, streaks, adherence."""

from pantrywise.nutrition.calculations import (
    best_streak,
    current_streak,
    day_range,
    is_on_target,
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
from pantrywise.nutrition.service import AggregateOptions, NutritionService

__all__ = [
    "AggregateOptions",
    "DailyCalories",
    "MealLogEntry",
    "NutritionAdherence",
    "NutritionAggregates",
    "NutritionDaySummary",
    "NutritionService",
    "NutritionStreak",
    "NutritionWeekSummary",
    "best_streak",
    "current_streak",
    "day_range",
    "is_on_target",
    "week_range",
]
