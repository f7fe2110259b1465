"""Statistics over logged food records."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from kcalcal.domain.records import FoodRecord, Macronutrients
from kcalcal.domain.stats import (
    DailyGoalProgress,
    DailyStats,
    GoalProgress,
    GoalStatus,
    WeeklyStats,
)
from kcalcal.services.preferences import PreferencesService
from kcalcal.services.records import RecordService

_logger = logging.getLogger(__name__)

WEEK_DAYS = 7
GOAL_MET_LOW = 90
GOAL_MET_HIGH = 110


def calculate_daily_stats(
    records: Iterable[FoodRecord], day: date, tz: ZoneInfo
) -> DailyStats:
    """Sum the records whose local calendar date is ``day``."""
    day_records = [record for record in records if _record_day(record, tz) == day]
    total_calories = sum(record.calories for record in day_records)
    meal_count = len(day_records)
    macronutrients = Macronutrients()
    for record in day_records:
        macronutrients = macronutrients + record.macronutrients
    return DailyStats(
        date=day,
        total_calories=total_calories,
        meal_count=meal_count,
        avg_calories_per_meal=(
            _round_half_up(total_calories / meal_count) if meal_count else 0
        ),
        macronutrients=macronutrients,
    )


def calculate_weekly_stats(
    records: Iterable[FoodRecord], today: date, tz: ZoneInfo
) -> WeeklyStats:
    """Aggregate the seven days ending with ``today``."""
    materialized = list(records)
    start = today - timedelta(days=WEEK_DAYS - 1)
    daily = [
        calculate_daily_stats(materialized, start + timedelta(days=offset), tz)
        for offset in range(WEEK_DAYS)
    ]
    total_calories = sum(entry.total_calories for entry in daily)
    macronutrients = Macronutrients()
    for entry in daily:
        macronutrients = macronutrients + entry.macronutrients
    return WeeklyStats(
        start_date=start,
        end_date=today,
        total_calories=total_calories,
        avg_daily_calories=_round_half_up(total_calories / WEEK_DAYS),
        daily_stats=daily,
        macronutrients=macronutrients,
    )


def calculate_goal_progress(
    current_calories: float, goal_calories: float
) -> GoalProgress:
    """Compare intake to the goal: under below 90%, met up to 110%, else over."""
    if goal_calories <= 0:
        raise ValueError("Goal calories must be positive")
    percentage = _round_half_up(current_calories / goal_calories * 100)
    status: GoalStatus
    if percentage < GOAL_MET_LOW:
        status = "under"
    elif percentage <= GOAL_MET_HIGH:
        status = "met"
    else:
        status = "over"
    return GoalProgress(
        goal_calories=int(goal_calories),
        current_calories=int(current_calories),
        percentage=percentage,
        remaining=int(goal_calories - current_calories),
        status=status,
    )


@dataclass
class StatsService:
    """Service computing stats for the stored records in a fixed timezone."""

    records: RecordService
    preferences: PreferencesService
    timezone_name: str

    def daily(self, day: date | None = None) -> DailyStats:
        """Return stats for ``day`` (default today)."""
        tz = ZoneInfo(self.timezone_name)
        return calculate_daily_stats(
            self.records.get_all(), day or _today(tz), tz
        )

    def weekly(self) -> WeeklyStats:
        """Return stats for the trailing week."""
        tz = ZoneInfo(self.timezone_name)
        return calculate_weekly_stats(self.records.get_all(), _today(tz), tz)

    def goal_progress(self, day: date | None = None) -> DailyGoalProgress:
        """Return goal progress for ``day`` (default today)."""
        daily = self.daily(day)
        progress = calculate_goal_progress(
            daily.total_calories, self.preferences.goal_calories()
        )
        return DailyGoalProgress(date=daily.date, progress=progress)


def _record_day(record: FoodRecord, tz: ZoneInfo) -> date | None:
    try:
        return datetime.fromtimestamp(record.timestamp / 1000, tz=tz).date()
    except (OverflowError, ValueError, OSError):
        _logger.warning(
            "Skipping record with unusable timestamp: id=%s timestamp=%s",
            record.id,
            record.timestamp,
        )
        return None


def _today(tz: ZoneInfo) -> date:
    return datetime.now(tz=tz).date()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
