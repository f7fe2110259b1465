"""Models for nutrition analysis results."""

import math
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )


class MacronutrientEstimate(_CamelModel):
    """Estimated macronutrient grams."""

    carbs: float = 0
    protein: float = 0
    fat: float = 0
    sugar: float = 0

    @field_validator("carbs", "protein", "fat", "sugar", mode="before")
    @classmethod
    def _none_to_zero(cls, value: object) -> object:
        return 0 if value is None or value == "" else value


class FoodAnalysis(_CamelModel):
    """Structured nutrition estimate returned by the model."""

    food_name: str = ""
    portion_size: str = ""
    calories: int = 0
    macronutrients: MacronutrientEstimate = Field(
        default_factory=MacronutrientEstimate
    )
    confidence: float | None = None
    description: str | None = None

    @field_validator("calories", mode="before")
    @classmethod
    def _round_calories(cls, value: object) -> object:
        if value is None or value == "":
            return 0
        if isinstance(value, (int, float, str)) and not isinstance(value, bool):
            try:
                number = float(value)
            except OverflowError as exc:
                raise ValueError("calories is out of range") from exc
            if not math.isfinite(number):
                raise ValueError("calories must be a finite number")
            return round(number)
        return value

    @field_validator("macronutrients", mode="before")
    @classmethod
    def _default_macros(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return min(max(value, 0.0), 1.0)


@dataclass(frozen=True)
class AnalysisFailure:
    """Structured failure from the analysis gateway."""

    error: str
    status_code: int
    raw_response: str | None = None
    details: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the JSON error body."""
        payload: dict[str, object] = {"error": self.error}
        if self.raw_response is not None:
            payload["rawResponse"] = self.raw_response
        if self.details is not None:
            payload["details"] = self.details
        return payload
