"""Food record storage with read-time schema migration."""

from dataclasses import dataclass
from typing import Protocol

from kcalcal.domain.records import FoodRecord, Macronutrients

_MACRO_FIELDS = ("carbs", "protein", "fat", "sugar")


class RecordRepository(Protocol):
    """Persistence interface for record documents keyed by integer id."""

    def insert(self, document: dict[str, object]) -> int:
        """Store a document and return its assigned id."""

    def list_documents(self) -> list[tuple[int, dict[str, object]]]:
        """Return every stored document with its id."""

    def delete(self, record_id: int) -> None:
        """Remove a document by id."""


@dataclass
class RecordService:
    """Service for saving, listing and deleting food records."""

    repository: RecordRepository

    def save(self, record: FoodRecord) -> int:
        """Store a new record; any id on the input is ignored."""
        return self.repository.insert(record.to_document())

    def get_all(self) -> list[FoodRecord]:
        """Return all records in the current shape, oldest first."""
        records = [
            normalize_record(record_id, document)
            for record_id, document in self.repository.list_documents()
        ]
        return sorted(records, key=lambda record: record.timestamp)

    def delete(self, record_id: int) -> None:
        """Delete a record."""
        self.repository.delete(record_id)


def normalize_record(record_id: int | None, document: dict[str, object]) -> FoodRecord:
    """Build a record from a stored document of any known layout.

    Older documents kept carbs/protein/fat/sugar as top-level fields, and
    some predate macronutrients entirely; both are mapped into the nested
    object. The input document is not modified.
    """
    macros = document.get("macronutrients")
    if isinstance(macros, dict):
        source: dict[str, object] = macros
    elif any(name in document for name in _MACRO_FIELDS):
        source = document
    else:
        source = {}

    confidence = document.get("confidence")
    description = document.get("description")
    return FoodRecord(
        id=record_id,
        timestamp=int(_number(document.get("timestamp"))),
        image_data=str(document.get("imageData") or ""),
        food_name=str(document.get("foodName") or ""),
        portion_size=str(document.get("portionSize") or ""),
        calories=int(_number(document.get("calories"))),
        macronutrients=Macronutrients(
            **{name: _number(source.get(name)) for name in _MACRO_FIELDS}
        ),
        confidence=float(confidence) if _is_number(confidence) else None,
        description=str(description) if description is not None else None,
    )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(value: object) -> float:
    if _is_number(value):
        return value  # type: ignore[return-value]
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0
