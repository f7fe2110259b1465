"""User preferences stored as named strings."""

from dataclasses import dataclass
from typing import Protocol

from kcalcal.config import parse_goal_calories

GOAL_CALORIES_KEY = "goal_calories"
MODEL_KEY = "model"


class PreferencesRepository(Protocol):
    """Persistence interface for string preferences."""

    def get(self, key: str) -> str | None:
        """Return a stored preference."""

    def set(self, key: str, value: str) -> None:
        """Create or replace a preference."""


@dataclass
class PreferencesService:
    """Service for typed access to stored preferences."""

    repository: PreferencesRepository
    default_goal_calories: int
    default_model: str

    def goal_calories(self) -> int:
        """Return the daily calorie goal."""
        stored = parse_goal_calories(self.repository.get(GOAL_CALORIES_KEY))
        return stored or self.default_goal_calories

    def set_goal_calories(self, value: int) -> None:
        """Store the daily calorie goal."""
        if value <= 0:
            raise ValueError("Goal calories must be positive")
        self.repository.set(GOAL_CALORIES_KEY, str(value))

    def stored_goal_calories(self) -> int | None:
        """Return the goal only if the user has set one."""
        return parse_goal_calories(self.repository.get(GOAL_CALORIES_KEY))

    def model(self) -> str:
        """Return the preferred analysis model."""
        return self.repository.get(MODEL_KEY) or self.default_model

    def set_model(self, value: str) -> None:
        """Store the preferred analysis model."""
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Model name must not be empty")
        self.repository.set(MODEL_KEY, cleaned)
