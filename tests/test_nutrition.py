"""Unit tests for nutrition aggregates."""

from datetime import date, datetime

import pytest

from pantrywise.nutrition.calculations import (
    adherence_range,
    best_streak,
    current_streak,
    day_range,
    is_on_target,
    summarize_adherence,
    week_range,
)
from pantrywise.nutrition.schemas import DailyCalories
from pantrywise.nutrition.service import AggregateOptions

# Thursday
REFERENCE = datetime(2024, 3, 14, 18, 30)

MEAL_LOGS = [
    (datetime(2024, 3, 10, 12, 0), 2000),
    (datetime(2024, 3, 11, 12, 0), 1900),
    (datetime(2024, 3, 12, 12, 0), 2150),
    (datetime(2024, 3, 13, 12, 0), 2250),
    (datetime(2024, 3, 14, 8, 0), 1000),
    (datetime(2024, 3, 14, 13, 0), 1100),
]


def _days(*entries: tuple[int, int]) -> list[DailyCalories]:
    return [DailyCalories(date=date(2024, 3, day), calories=calories) for day, calories in entries]


# =============================================================================
# Calendar Windows
# =============================================================================


class TestCalendarWindows:
    """Tests for day, week and adherence windows."""

    def test_day_range(self):
        """Test the day spans midnight to the last millisecond."""
        start, end = day_range(REFERENCE)
        assert start == datetime(2024, 3, 14, 0, 0, 0)
        assert end == datetime(2024, 3, 14, 23, 59, 59, 999000)

    def test_week_starts_monday(self):
        """Test the week runs Monday to Sunday."""
        start, end = week_range(REFERENCE)
        assert start == datetime(2024, 3, 11)
        assert end == datetime(2024, 3, 17, 23, 59, 59, 999000)

    def test_sunday_belongs_to_previous_monday(self):
        """Test Sunday is the seventh day of its week."""
        start, _ = week_range(datetime(2024, 3, 17, 9, 0))
        assert start == datetime(2024, 3, 11)

    def test_monday_starts_its_own_week(self):
        """Test Monday maps to itself."""
        start, _ = week_range(datetime(2024, 3, 11, 0, 0))
        assert start == datetime(2024, 3, 11)

    def test_adherence_range(self):
        """Test the trailing window includes the reference day."""
        start, end = adherence_range(REFERENCE, 14)
        assert start == datetime(2024, 3, 1)
        assert end.date() == date(2024, 3, 14)


# =============================================================================
# Goal Arithmetic
# =============================================================================


class TestIsOnTarget:
    """Tests for is_on_target function."""

    def test_within_tolerance(self):
        """Test 2150 is on target for a 2000 goal at 10%."""
        assert is_on_target(2150, 2000, 10)

    def test_outside_tolerance(self):
        """Test 2250 is off target for a 2000 goal at 10%."""
        assert not is_on_target(2250, 2000, 10)

    def test_band_edges_inclusive(self):
        """Test both edges of the band count."""
        assert is_on_target(1800, 2000, 10)
        assert is_on_target(2200, 2000, 10)
        assert not is_on_target(1799, 2000, 10)

    def test_tolerance_rounded(self):
        """Test the tolerance is rounded to whole calories, halves up."""
        # 1805 * 0.1 = 180.5 -> 181
        assert is_on_target(1805 + 181, 1805, 10)
        assert not is_on_target(1805 + 182, 1805, 10)


class TestStreaks:
    """Tests for current and best streak."""

    def test_best_streak_gap_starts_new_run(self):
        """Test a missing day ends the run and the next day starts at one."""
        daily = _days((1, 2000), (2, 2000), (3, 2000), (5, 2000))
        best, last_met = best_streak(daily, 2000, 10)
        assert best == 3
        assert last_met == date(2024, 3, 5)

    def test_best_streak_off_target_resets(self):
        """Test an off-target day zeroes the run."""
        daily = _days((1, 2000), (2, 3000), (3, 2000), (4, 2000))
        best, last_met = best_streak(daily, 2000, 10)
        assert best == 2
        assert last_met == date(2024, 3, 4)

    def test_best_streak_ignores_order_and_zero_days(self):
        """Test unsorted input and days without calories."""
        daily = _days((3, 2000), (1, 2000), (2, 0))
        best, _ = best_streak(daily, 2000, 10)
        assert best == 1

    def test_best_streak_none_on_target(self):
        """Test no on-target days."""
        assert best_streak(_days((1, 500)), 2000, 10) == (0, None)

    def test_current_streak(self):
        """Test walking back from the reference day."""
        daily = _days((11, 2000), (12, 2000), (13, 2000), (14, 1900))
        assert current_streak(daily, date(2024, 3, 14), 2000, 10) == 4

    def test_current_streak_broken_by_missing_day(self):
        """Test a day without records stops the walk."""
        daily = _days((12, 2000), (14, 2000))
        assert current_streak(daily, date(2024, 3, 14), 2000, 10) == 1

    def test_current_streak_reference_off_target(self):
        """Test an off-target reference day means no current streak."""
        daily = _days((13, 2000), (14, 3000))
        assert current_streak(daily, date(2024, 3, 14), 2000, 10) == 0


class TestAdherence:
    """Tests for summarize_adherence function."""

    def test_rate(self):
        """Test only tracked days count."""
        adherence = summarize_adherence(_days((1, 2000), (2, 0), (3, 2500)), 14, 2000, 10)
        assert adherence.total_tracked_days == 2
        assert adherence.days_on_target == 1
        assert adherence.rate_percent == 50

    def test_no_tracked_days(self):
        """Test the rate is zero without tracked days."""
        assert summarize_adherence([], 14, 2000, 10).rate_percent == 0


# =============================================================================
# Service
# =============================================================================


class TestNutritionService:
    """Tests for NutritionService.get_aggregates."""

    @pytest.mark.asyncio
    async def test_aggregates(self, nutrition_service_factory):
        """Test today, week, streak and adherence together."""
        service = nutrition_service_factory(
            logs=MEAL_LOGS,
            goal=2000,
            planned={date(2024, 3, 11): 2100, date(2024, 3, 18): 500},
        )
        result = await service.get_aggregates("user-1", AggregateOptions(reference_date=REFERENCE))

        assert result.today.date == date(2024, 3, 14)
        assert result.today.consumed_calories == 2100
        assert result.today.remaining_calories == -100
        assert result.today.adherence_percent == 105
        assert len(result.today.entries) == 2

        assert result.week.start_date == date(2024, 3, 11)
        assert result.week.end_date == date(2024, 3, 17)
        assert result.week.goal_calories == 14000
        assert result.week.consumed_calories == 8400
        assert result.week.planned_calories == 2100
        assert result.week.remaining_calories == 5600
        assert result.week.adherence_percent == 60
        assert len(result.week.daily) == 7
        assert result.week.daily[0].planned_calories == 2100
        assert result.week.daily[6].consumed_calories == 0

        assert result.streak.current_days == 1
        assert result.streak.best_days == 3
        assert result.streak.last_met_date == date(2024, 3, 14)

        assert result.adherence.window_days == 14
        assert result.adherence.total_tracked_days == 5
        assert result.adherence.days_on_target == 4
        assert result.adherence.rate_percent == 80

    @pytest.mark.asyncio
    async def test_no_goal(self, nutrition_service_factory):
        """Test everything goal-dependent is null or zero without a goal."""
        service = nutrition_service_factory(logs=MEAL_LOGS, goal=None)
        result = await service.get_aggregates("user-1", AggregateOptions(reference_date=REFERENCE))

        assert result.today.consumed_calories == 2100
        assert result.today.remaining_calories is None
        assert result.today.adherence_percent is None
        assert result.week.goal_calories is None
        assert result.week.adherence_percent is None
        assert result.streak.current_days == 0
        assert result.streak.best_days == 0
        assert result.streak.last_met_date is None
        assert result.adherence.rate_percent == 0

    @pytest.mark.asyncio
    async def test_goal_override_wins(self, nutrition_service_factory):
        """Test an explicit goal skips the stored preference."""
        service = nutrition_service_factory(logs=MEAL_LOGS, goal=1000)
        result = await service.get_aggregates(
            "user-1",
            AggregateOptions(reference_date=REFERENCE, goal_calories=2000),
        )
        assert result.today.goal_calories == 2000
        assert service.preferences.calls == 0

    @pytest.mark.asyncio
    async def test_zero_goal_override(self, nutrition_service_factory):
        """Test a zero goal is used as given but disables targets."""
        service = nutrition_service_factory(logs=MEAL_LOGS, goal=2000)
        result = await service.get_aggregates(
            "user-1",
            AggregateOptions(reference_date=REFERENCE, goal_calories=0),
        )
        assert result.today.goal_calories == 0
        assert result.today.remaining_calories == -2100
        assert result.today.adherence_percent is None
        assert result.streak.best_days == 0
        assert result.adherence.total_tracked_days == 0

    @pytest.mark.asyncio
    async def test_tolerance_override(self, nutrition_service_factory):
        """Test a tighter tolerance changes which days are on target."""
        service = nutrition_service_factory(logs=MEAL_LOGS, goal=2000)
        result = await service.get_aggregates(
            "user-1",
            AggregateOptions(reference_date=REFERENCE, tolerance_percent=5),
        )
        # 2000, 1900 and 2100 are within 100 of the goal
        assert result.adherence.days_on_target == 3
        assert result.streak.best_days == 2

    @pytest.mark.asyncio
    async def test_no_logs(self, nutrition_service_factory):
        """Test a user with no meal logs."""
        service = nutrition_service_factory(logs=[], goal=2000)
        result = await service.get_aggregates("user-1", AggregateOptions(reference_date=REFERENCE))
        assert result.today.consumed_calories == 0
        assert result.today.entries == []
        assert result.streak.current_days == 0
        assert result.adherence.rate_percent == 0
