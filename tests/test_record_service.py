"""Tests for the record store and its legacy migration."""

from dataclasses import replace

from kcalcal.domain.records import FoodRecord, Macronutrients
from kcalcal.services.records import RecordService, normalize_record
from tests.conftest import InMemoryRecordRepository


def _record(timestamp: int, calories: int = 300) -> FoodRecord:
    return FoodRecord(
        timestamp=timestamp,
        image_data="data:image/jpeg;base64,AAAA",
        food_name="Rice",
        portion_size="1 bowl",
        calories=calories,
        macronutrients=Macronutrients(carbs=60, protein=6, fat=1, sugar=0),
        confidence=0.9,
    )


def test_save_assigns_incrementing_ids() -> None:
    service = RecordService(InMemoryRecordRepository())

    first = service.save(_record(1000))
    second = service.save(_record(2000))

    assert second == first + 1


def test_save_ignores_input_id() -> None:
    repository = InMemoryRecordRepository()
    service = RecordService(repository)
    record = _record(1000)

    record_id = service.save(replace(record, id=99))

    assert record_id == 1
    assert "id" not in repository.documents[1]


def test_get_all_sorts_by_timestamp() -> None:
    service = RecordService(InMemoryRecordRepository())
    service.save(_record(3000))
    service.save(_record(1000))

    records = service.get_all()

    assert [record.timestamp for record in records] == [1000, 3000]
    assert [record.id for record in records] == [2, 1]


def test_delete_removes_record() -> None:
    service = RecordService(InMemoryRecordRepository())
    record_id = service.save(_record(1000))
    service.save(_record(2000))

    service.delete(record_id)

    assert [record.timestamp for record in service.get_all()] == [2000]


def test_legacy_flat_record_matches_native_shape() -> None:
    base = {
        "timestamp": 1000,
        "imageData": "img",
        "foodName": "Salad",
        "portionSize": "1 plate",
        "calories": 180,
    }
    legacy = {**base, "carbs": 12, "protein": 5, "fat": 11, "sugar": 4}
    native = {
        **base,
        "macronutrients": {"carbs": 12, "protein": 5, "fat": 11, "sugar": 4},
    }

    assert normalize_record(7, legacy) == normalize_record(7, native)


def test_record_without_macros_is_backfilled_with_zeros() -> None:
    document = {"timestamp": 1000, "foodName": "Tea", "calories": 2}

    record = normalize_record(1, document)

    assert record.macronutrients == Macronutrients(0, 0, 0, 0)
    assert record.image_data == ""


def test_partial_legacy_fields_default_to_zero() -> None:
    record = normalize_record(1, {"timestamp": 1, "calories": 50, "carbs": 10})

    assert record.macronutrients == Macronutrients(carbs=10)


def test_read_does_not_mutate_stored_document() -> None:
    repository = InMemoryRecordRepository()
    legacy = {"timestamp": 1000, "foodName": "Salad", "calories": 180, "carbs": 12}
    repository.documents[1] = legacy

    RecordService(repository).get_all()

    assert "macronutrients" not in repository.documents[1]
