"""Calendar windows and calorie-goal arithmetic.

Everything here is pure; the service feeds it rows from the repositories.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta

from pantrywise.normalize.units import round_half_up
from pantrywise.nutrition.schemas import (
    DailyCalories,
    MealLogEntry,
    NutritionAdherence,
    NutritionDaySummary,
    NutritionStreak,
    NutritionWeekDay,
    NutritionWeekSummary,
)

DEFAULT_TOLERANCE_PERCENT = 10.0
DEFAULT_ADHERENCE_WINDOW_DAYS = 14

END_OF_DAY = time(23, 59, 59, 999000)


# =============================================================================
# Calendar windows
# =============================================================================


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), END_OF_DAY, tzinfo=moment.tzinfo)


def day_range(moment: datetime) -> tuple[datetime, datetime]:
    """Bounds of the calendar day containing ``moment``, both inclusive."""
    return start_of_day(moment), end_of_day(moment)


def week_range(moment: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999 of the week containing ``moment``."""
    monday = start_of_day(moment) - timedelta(days=moment.weekday())
    sunday = monday + timedelta(days=6)
    return monday, end_of_day(sunday)


def adherence_range(moment: datetime, window_days: int) -> tuple[datetime, datetime]:
    """Trailing window of ``window_days`` calendar days ending on ``moment``'s day."""
    start = start_of_day(moment) - timedelta(days=window_days - 1)
    return start, end_of_day(moment)


# =============================================================================
# Goal arithmetic
# =============================================================================


def has_goal(goal_calories: int | None) -> bool:
    return bool(goal_calories) and goal_calories > 0


def is_on_target(calories: int, goal_calories: int, tolerance_percent: float) -> bool:
    """Check whether a day's calories fall within the tolerance band around the goal."""
    tolerance = round_half_up(goal_calories * (tolerance_percent / 100))
    return goal_calories - tolerance <= calories <= goal_calories + tolerance


def percent_of(consumed: int, goal: int | None) -> int | None:
    if not goal:
        return None
    return round_half_up(consumed / goal * 100)


def summarize_day(
    day: date,
    entries: Sequence[MealLogEntry],
    goal_calories: int | None,
) -> NutritionDaySummary:
    consumed = sum(entry.calories for entry in entries)
    return NutritionDaySummary(
        date=day,
        goal_calories=goal_calories,
        consumed_calories=consumed,
        remaining_calories=None if goal_calories is None else goal_calories - consumed,
        adherence_percent=percent_of(consumed, goal_calories),
        entries=list(entries),
    )


def summarize_week(
    week_start: date,
    consumed: Iterable[DailyCalories],
    planned: Iterable[DailyCalories],
    goal_calories: int | None,
) -> NutritionWeekSummary:
    """Lay out seven days from ``week_start`` with planned and consumed totals."""
    consumed_by_day = {day.date: day.calories for day in consumed}
    planned_by_day = {day.date: day.calories for day in planned}

    daily = []
    for offset in range(7):
        current = week_start + timedelta(days=offset)
        daily.append(
            NutritionWeekDay(
                date=current,
                planned_calories=planned_by_day.get(current, 0),
                consumed_calories=consumed_by_day.get(current, 0),
            )
        )

    planned_total = sum(day.planned_calories for day in daily)
    consumed_total = sum(day.consumed_calories for day in daily)
    weekly_goal = None if goal_calories is None else goal_calories * 7

    return NutritionWeekSummary(
        start_date=week_start,
        end_date=week_start + timedelta(days=6),
        goal_calories=weekly_goal,
        planned_calories=planned_total,
        consumed_calories=consumed_total,
        remaining_calories=None if weekly_goal is None else weekly_goal - consumed_total,
        adherence_percent=percent_of(consumed_total, weekly_goal),
        daily=daily,
    )


# =============================================================================
# Streaks and adherence
# =============================================================================


def current_streak(
    daily: Iterable[DailyCalories],
    reference_day: date,
    goal_calories: int,
    tolerance_percent: float,
) -> int:
    """Count consecutive on-target days walking back from ``reference_day``."""
    on_target = {
        day.date for day in daily if is_on_target(day.calories, goal_calories, tolerance_percent)
    }

    streak = 0
    cursor = reference_day
    while cursor in on_target:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def best_streak(
    daily: Iterable[DailyCalories],
    goal_calories: int,
    tolerance_percent: float,
) -> tuple[int, date | None]:
    """
    Find the longest run of consecutive on-target days.

    Only days with calories count. An off-target day zeroes the run; an
    on-target day after a gap in the records starts a new run of 1.

    Returns:
        The best run length and the most recent on-target day.
    """
    tracked = sorted((day for day in daily if day.calories > 0), key=lambda day: day.date)

    best = 0
    running = 0
    previous: date | None = None
    last_met: date | None = None

    for day in tracked:
        if not is_on_target(day.calories, goal_calories, tolerance_percent):
            running = 0
            previous = day.date
            continue

        last_met = day.date
        if previous is not None and (day.date - previous).days == 1:
            running += 1
        else:
            running = 1

        best = max(best, running)
        previous = day.date

    return best, last_met


def summarize_streak(
    daily: Sequence[DailyCalories],
    reference_day: date,
    goal_calories: int,
    tolerance_percent: float,
) -> NutritionStreak:
    best, last_met = best_streak(daily, goal_calories, tolerance_percent)
    return NutritionStreak(
        current_days=current_streak(daily, reference_day, goal_calories, tolerance_percent),
        best_days=best,
        last_met_date=last_met,
    )


def summarize_adherence(
    daily: Iterable[DailyCalories],
    window_days: int,
    goal_calories: int,
    tolerance_percent: float,
) -> NutritionAdherence:
    tracked = [day for day in daily if day.calories > 0]
    on_target = sum(
        1 for day in tracked if is_on_target(day.calories, goal_calories, tolerance_percent)
    )
    total = len(tracked)
    return NutritionAdherence(
        window_days=window_days,
        days_on_target=on_target,
        total_tracked_days=total,
        rate_percent=round_half_up(on_target / total * 100) if total else 0,
    )
