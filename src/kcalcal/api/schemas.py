"""Pydantic models for the HTTP API."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kcalcal.domain.records import MAX_TIMESTAMP_MS, FoodRecord, Macronutrients


class ApiModel(BaseModel):
    """Base model using camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
    )


class AnalyzeFoodRequest(ApiModel):
    """Photo analysis request."""

    image_data: str | None = None
    model: str | None = None


class SearchNutritionRequest(ApiModel):
    """Nutrition lookup by food name."""

    food_name: str = Field(min_length=1)
    portion_size: str = "1 serving"
    model: str | None = None


class MacronutrientsModel(ApiModel):
    """Macronutrient grams."""

    carbs: float = 0
    protein: float = 0
    fat: float = 0
    sugar: float = 0


class FoodRecordIn(ApiModel):
    """Record to store after the user confirms an analysis."""

    timestamp: int = Field(ge=0, le=MAX_TIMESTAMP_MS)
    image_data: str
    food_name: str
    portion_size: str = ""
    calories: int
    macronutrients: MacronutrientsModel = Field(default_factory=MacronutrientsModel)
    confidence: float | None = None
    description: str | None = None

    def to_domain(self) -> FoodRecord:
        """Convert into a domain record without an id."""
        return FoodRecord(
            timestamp=self.timestamp,
            image_data=self.image_data,
            food_name=self.food_name,
            portion_size=self.portion_size,
            calories=self.calories,
            macronutrients=Macronutrients(**self.macronutrients.model_dump()),
            confidence=self.confidence,
            description=self.description,
        )


class FoodRecordOut(FoodRecordIn):
    """Stored record."""

    id: int
    timestamp: int


class RecordCreated(ApiModel):
    """Identifier assigned to a new record."""

    id: int


class DailyStatsOut(ApiModel):
    """Daily totals."""

    date: date
    total_calories: int
    meal_count: int
    avg_calories_per_meal: int
    macronutrients: MacronutrientsModel


class WeeklyStatsOut(ApiModel):
    """Trailing seven-day totals."""

    start_date: date
    end_date: date
    total_calories: int
    avg_daily_calories: int
    daily_stats: list[DailyStatsOut]
    macronutrients: MacronutrientsModel


class GoalProgressOut(ApiModel):
    """Goal progress for a day."""

    date: date
    goal_calories: int
    current_calories: int
    percentage: int
    remaining: int
    status: Literal["under", "met", "over"]


class PreferencesOut(ApiModel):
    """Stored preferences."""

    goal_calories: int
    model: str


class PreferencesUpdate(ApiModel):
    """Partial preferences update."""

    goal_calories: int | None = Field(default=None, gt=0)
    model: str | None = None


class RestoreResultOut(ApiModel):
    """Restore outcome."""

    success: bool
    message: str
    records_count: int | None = None
