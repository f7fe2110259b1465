"""JSON backup export and restore."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from kcalcal.domain.records import is_valid_timestamp
from kcalcal.services.preferences import PreferencesService
from kcalcal.services.records import RecordService, normalize_record

BACKUP_VERSION = "1.0"

_logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class BackupSettings(_CamelModel):
    """Settings carried in a backup."""

    goal_calories: int | None = None


class BackupData(_CamelModel):
    """Backup file contents."""

    version: str
    export_date: str
    records: list[Any]
    settings: BackupSettings = Field(default_factory=BackupSettings)

    @field_validator("version", "export_date")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("settings", mode="before")
    @classmethod
    def _default_settings(cls, value: object) -> object:
        return {} if value is None else value


@dataclass(frozen=True)
class RestoreResult:
    """Outcome of a restore."""

    success: bool
    message: str
    records_count: int | None = None


@dataclass
class BackupService:
    """Service exporting and importing records and settings."""

    records: RecordService
    preferences: PreferencesService

    def export_backup(self) -> BackupData:
        """Return every record and the goal setting."""
        documents: list[dict[str, object]] = []
        for record in self.records.get_all():
            document = record.to_document()
            document["id"] = record.id
            documents.append(document)
        return BackupData(
            version=BACKUP_VERSION,
            export_date=datetime.now(tz=UTC).isoformat(),
            records=documents,
            settings=BackupSettings(
                goal_calories=self.preferences.stored_goal_calories()
            ),
        )

    def restore_backup(self, data: object) -> RestoreResult:
        """Import a backup; records that fail validation are skipped."""
        if not validate_backup(data):
            return RestoreResult(success=False, message="Invalid backup file.")
        backup = BackupData.model_validate(data)

        if backup.settings.goal_calories:
            self.preferences.set_goal_calories(backup.settings.goal_calories)

        restored = 0
        for index, document in enumerate(backup.records):
            if not is_valid_record_document(document):
                _logger.warning("Skipping invalid backup record at index %s", index)
                continue
            stripped = {key: value for key, value in document.items() if key != "id"}
            try:
                self.records.save(normalize_record(None, stripped))
            except Exception:
                _logger.exception("Failed to restore backup record at index %s", index)
                continue
            restored += 1

        return RestoreResult(
            success=True,
            message=f"Restored {restored} records.",
            records_count=restored,
        )


def validate_backup(data: object) -> bool:
    """Check the top-level backup shape."""
    if not isinstance(data, dict):
        return False
    try:
        BackupData.model_validate(data)
    except ValidationError:
        return False
    return True


def is_valid_record_document(document: object) -> bool:
    """Check the fields a record needs to be restored."""
    if not isinstance(document, dict):
        return False
    return (
        is_valid_timestamp(document.get("timestamp"))
        and isinstance(document.get("foodName"), str)
        and _is_number(document.get("calories"))
    )


def _is_number(value: object) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)
