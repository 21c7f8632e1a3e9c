"""Export and import of the whole store as a versioned JSON document."""

from __future__ import annotations

import datetime
import json
import logging
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError as PydanticValidationError,
)

from config import APP_VERSION
from errors import DataImportError, ValidationError
from models import (
    MAX_INTEGER,
    ExerciseCategory,
    WorkoutRecord,
    WorkoutSetDetail,
    to_local_naive,
)
from record_store import RecordStore
from settings_schema import first_error_message, validate_settings

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class SetDetailDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weight: Optional[float] = Field(None, ge=0)
    reps: Optional[int] = Field(None, ge=0, le=MAX_INTEGER)
    duration: Optional[int] = Field(None, ge=0, le=MAX_INTEGER)
    distance: Optional[float] = Field(None, ge=0)


class RecordDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    exercise_name: str = Field(min_length=1)
    category: ExerciseCategory
    sets: int = Field(ge=0, le=MAX_INTEGER)
    duration_minutes: int = Field(ge=0, le=MAX_INTEGER)
    xp_earned: int = Field(ge=0, le=MAX_INTEGER)
    timestamp: datetime.datetime
    details: List[SetDetailDocument] = []

    @classmethod
    def from_record(cls, record: WorkoutRecord) -> "RecordDocument":
        return cls(
            id=record.id,
            exercise_name=record.exercise_name,
            category=record.category,
            sets=record.sets,
            duration_minutes=record.duration_minutes,
            xp_earned=record.xp_earned,
            timestamp=record.timestamp,
            details=[
                SetDetailDocument(
                    weight=d.weight, reps=d.reps, duration=d.duration, distance=d.distance
                )
                for d in record.details
            ],
        )

    def to_record(self) -> WorkoutRecord:
        return WorkoutRecord(
            id=self.id,
            exercise_name=self.exercise_name,
            category=self.category,
            sets=self.sets,
            duration_minutes=self.duration_minutes,
            xp_earned=self.xp_earned,
            timestamp=self.timestamp,
            details=tuple(
                WorkoutSetDetail(
                    weight=d.weight, reps=d.reps, duration=d.duration, distance=d.distance
                )
                for d in self.details
            ),
        )


class TransferDocument(BaseModel):
    """Shape of an exported store. Unknown fields are ignored on import."""

    model_config = ConfigDict(extra="ignore")

    format_version: StrictInt = Field(ge=1, le=FORMAT_VERSION)
    app_version: Optional[str] = None
    exported_at: Optional[datetime.datetime] = None
    user_name: Optional[str] = None
    settings: dict
    records: List[RecordDocument]


class TransferService:
    """Serialize the store to a transfer document and restore it."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def build_document(self, now: datetime.datetime | None = None) -> TransferDocument:
        settings = self.store.settings()
        return TransferDocument(
            format_version=FORMAT_VERSION,
            app_version=APP_VERSION,
            exported_at=to_local_naive(now or datetime.datetime.now()).replace(
                microsecond=0
            ),
            user_name=settings["user_name"],
            settings=settings,
            records=[RecordDocument.from_record(r) for r in self.store.records()],
        )

    def export(self, now: datetime.datetime | None = None) -> str:
        """Return the full store as a JSON document."""
        doc = self.build_document(now)
        return json.dumps(doc.model_dump(mode="json"), ensure_ascii=False, indent=2)

    def parse(self, blob: str | bytes) -> TransferDocument:
        """Validate ``blob`` without touching the store."""
        try:
            payload = json.loads(blob)
        except (TypeError, ValueError) as e:
            raise DataImportError(f"document is not valid JSON: {e}")
        if not isinstance(payload, dict):
            raise DataImportError("document must be a JSON object")
        version = payload.get("format_version")
        if isinstance(version, int) and not isinstance(version, bool) and version > FORMAT_VERSION:
            raise DataImportError(f"unsupported format version: {version}")
        try:
            return TransferDocument.model_validate(payload)
        except PydanticValidationError as e:
            raise DataImportError(first_error_message(e))

    def import_data(self, blob: str | bytes, merge: bool = False) -> int:
        """Replace (or with ``merge`` extend) the store from ``blob``.

        Either everything is applied or the store is left unchanged.
        Returns the number of records written.
        """
        doc = self.parse(blob)
        settings = dict(doc.settings)
        if doc.user_name is not None:
            settings["user_name"] = doc.user_name
        try:
            settings = validate_settings(settings)
            inserted = self.store.replace_contents(
                [r.to_record() for r in doc.records], settings, merge=merge
            )
        except ValidationError as e:
            raise DataImportError(str(e))
        logger.debug("imported %d of %d records", inserted, len(doc.records))
        return inserted

    def export_to_file(self, path: str, now: datetime.datetime | None = None) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.export(now))

    def import_from_file(self, path: str, merge: bool = False) -> int:
        with open(path, "r", encoding="utf-8") as f:
            return self.import_data(f.read(), merge=merge)
