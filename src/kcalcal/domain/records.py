"""Domain models for logged food records."""

from dataclasses import dataclass, field

# Largest epoch-milliseconds value a datetime can represent (9999-12-31 UTC).
MAX_TIMESTAMP_MS = 253_402_300_799_999


@dataclass(frozen=True)
class Macronutrients:
    """Macronutrient grams for a record."""

    carbs: float = 0
    protein: float = 0
    fat: float = 0
    sugar: float = 0

    def __add__(self, other: "Macronutrients") -> "Macronutrients":
        return Macronutrients(
            carbs=self.carbs + other.carbs,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
            sugar=self.sugar + other.sugar,
        )

    def to_dict(self) -> dict[str, float]:
        """Return the wire representation."""
        return {
            "carbs": self.carbs,
            "protein": self.protein,
            "fat": self.fat,
            "sugar": self.sugar,
        }


@dataclass(frozen=True)
class FoodRecord:
    """One logged meal with its nutrition estimate."""

    timestamp: int
    image_data: str
    food_name: str
    portion_size: str
    calories: int
    macronutrients: Macronutrients = field(default_factory=Macronutrients)
    confidence: float | None = None
    description: str | None = None
    id: int | None = None

    def to_document(self) -> dict[str, object]:
        """Return the stored document; the id lives outside of it."""
        document: dict[str, object] = {
            "timestamp": self.timestamp,
            "imageData": self.image_data,
            "foodName": self.food_name,
            "portionSize": self.portion_size,
            "calories": self.calories,
            "macronutrients": self.macronutrients.to_dict(),
        }
        if self.confidence is not None:
            document["confidence"] = self.confidence
        if self.description is not None:
            document["description"] = self.description
        return document


def is_valid_timestamp(value: object) -> bool:
    """Return whether ``value`` is an epoch-milliseconds number in range."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return 0 <= value <= MAX_TIMESTAMP_MS
