"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

from kcalcal.domain.records import Macronutrients

GoalStatus = Literal["under", "met", "over"]


@dataclass(frozen=True)
class DailyStats:
    """Totals for one calendar day."""

    date: date
    total_calories: int
    meal_count: int
    avg_calories_per_meal: int
    macronutrients: Macronutrients


@dataclass(frozen=True)
class WeeklyStats:
    """Totals for the trailing seven days."""

    start_date: date
    end_date: date
    total_calories: int
    avg_daily_calories: int
    daily_stats: list[DailyStats]
    macronutrients: Macronutrients


@dataclass(frozen=True)
class GoalProgress:
    """Calorie intake compared to the daily goal."""

    goal_calories: int
    current_calories: int
    percentage: int
    remaining: int
    status: GoalStatus


@dataclass(frozen=True)
class DailyGoalProgress:
    """Goal progress for one calendar day."""

    date: date
    progress: GoalProgress
