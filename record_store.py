"""The workout record store: single source of truth for records and settings."""

from __future__ import annotations

import dataclasses
import datetime
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from config import DEFAULT_DB_PATH, DEFAULT_YAML_PATH
from db import SettingsRepository, WorkoutRecordRepository
from errors import ValidationError
from models import (
    MAX_INTEGER,
    ExerciseCategory,
    WorkoutRecord,
    WorkoutSetDetail,
    to_local_naive,
)
from period_filter import TimePeriod, filter_records
from settings_schema import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    RECORD_ADDED = "record_added"
    RECORD_REMOVED = "record_removed"
    RECORDS_CLEARED = "records_cleared"
    SETTINGS_CHANGED = "settings_changed"
    STORE_RESET = "store_reset"
    DATA_IMPORTED = "data_imported"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    record_id: Optional[str] = None
    keys: Tuple[str, ...] = ()


Subscriber = Callable[[ChangeEvent], None]


def _is_count(value) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_INTEGER
    )


def _is_amount(value) -> bool:
    if isinstance(value, int):
        return _is_count(value)
    return isinstance(value, float) and value >= 0


def _validate_detail(idx: int, detail: WorkoutSetDetail) -> None:
    if not isinstance(detail, WorkoutSetDetail):
        raise ValidationError(f"details[{idx}] is not a set detail")
    for name, check in (
        ("weight", _is_amount),
        ("reps", _is_count),
        ("duration", _is_count),
        ("distance", _is_amount),
    ):
        value = getattr(detail, name)
        if value is not None and not check(value):
            raise ValidationError(f"details[{idx}].{name} must be non-negative")


def validate_record(record: WorkoutRecord) -> WorkoutRecord:
    """Check ``record`` and return it normalized for storage.

    The category is coerced to :class:`ExerciseCategory`, details to a tuple
    and timezone-aware timestamps to naive local time.
    """
    if not isinstance(record, WorkoutRecord):
        raise ValidationError("not a workout record")
    if not isinstance(record.id, str) or not record.id:
        raise ValidationError("record id must be a non-empty string")
    if not isinstance(record.exercise_name, str) or not record.exercise_name.strip():
        raise ValidationError("exercise name must not be empty")
    try:
        category = ExerciseCategory(record.category)
    except ValueError:
        raise ValidationError(f"unknown category: {record.category}")
    for name in ("sets", "duration_minutes", "xp_earned"):
        if not _is_count(getattr(record, name)):
            raise ValidationError(f"{name} must be a non-negative integer")
    if not isinstance(record.timestamp, datetime.datetime):
        raise ValidationError("timestamp must be a datetime")
    details = tuple(record.details)
    for idx, detail in enumerate(details):
        _validate_detail(idx, detail)
    return dataclasses.replace(
        record,
        category=category,
        timestamp=to_local_naive(record.timestamp),
        details=details,
    )


def recent_order(records: Iterable[WorkoutRecord]) -> List[WorkoutRecord]:
    """Sort insertion-ordered ``records`` newest first.

    Equal timestamps keep the most recently inserted record first.
    """
    indexed = list(enumerate(records))
    indexed.sort(key=lambda item: (item[1].timestamp, item[0]), reverse=True)
    return [r for _, r in indexed]


class RecordStore:
    """Own the workout records and settings and notify subscribers of changes.

    Mutations are serialized by a lock and either fully applied or rejected
    with a :class:`~errors.FitAvatarError`; subscribers are only notified
    after a mutation has been committed.
    """

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        yaml_path: str | None = DEFAULT_YAML_PATH,
    ) -> None:
        self.workouts = WorkoutRecordRepository(db_path)
        self.settings_repo = SettingsRepository(db_path, yaml_path)
        self._lock = threading.RLock()
        self._subscribers: list[Subscriber] = []

    # subscriptions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def _notify(self, event: ChangeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("subscriber %r failed on %s", callback, event.kind.value)

    # records

    def add_record(self, record: WorkoutRecord) -> WorkoutRecord:
        stored = validate_record(record)
        with self._lock:
            self.workouts.add(stored)
        self._notify(ChangeEvent(ChangeKind.RECORD_ADDED, record_id=stored.id))
        return stored

    def remove_record(self, record_id: str) -> None:
        with self._lock:
            self.workouts.delete(record_id)
        self._notify(ChangeEvent(ChangeKind.RECORD_REMOVED, record_id=record_id))

    def clear_all(self) -> None:
        """Remove every workout record. Settings are left untouched."""
        with self._lock:
            self.workouts.delete_all()
        logger.debug("cleared all workout records")
        self._notify(ChangeEvent(ChangeKind.RECORDS_CLEARED))

    def reset_all(self) -> None:
        """Remove every record and restore the default settings."""
        with self._lock:
            self.workouts.reset(DEFAULT_SETTINGS)
            self.settings_repo.sync()
        logger.debug("reset records and settings")
        self._notify(ChangeEvent(ChangeKind.STORE_RESET))

    def replace_contents(
        self,
        records: Iterable[WorkoutRecord],
        settings: dict,
        merge: bool = False,
    ) -> int:
        """Write an imported snapshot in one transaction.

        All records are validated before anything is written.
        """
        checked = [validate_record(r) for r in records]
        ids = [r.id for r in checked]
        if len(set(ids)) != len(ids):
            raise ValidationError("duplicate record id")
        with self._lock:
            inserted = self.workouts.import_records(checked, settings, merge=merge)
            self.settings_repo.sync()
        self._notify(ChangeEvent(ChangeKind.DATA_IMPORTED))
        return inserted

    def records(self) -> Tuple[WorkoutRecord, ...]:
        """Return a snapshot of every record in insertion order."""
        with self._lock:
            return tuple(self.workouts.fetch_all_records())

    def get_record(self, record_id: str) -> WorkoutRecord:
        with self._lock:
            return self.workouts.fetch(record_id)

    def recent_workouts(self, limit: int | None = None) -> List[WorkoutRecord]:
        ordered = recent_order(self.records())
        return ordered if limit is None else ordered[:limit]

    def filtered(
        self,
        period: TimePeriod | str,
        now: datetime.datetime | datetime.date | None = None,
    ) -> List[WorkoutRecord]:
        """Return the records inside ``period``, newest first."""
        return filter_records(self.recent_workouts(), period, now)

    # settings

    def settings(self) -> dict:
        with self._lock:
            return self.settings_repo.all_settings()

    def setting(self, key: str):
        with self._lock:
            return self.settings_repo.get(key)

    def update_setting(self, key: str, value) -> None:
        self.update_settings(**{key: value})

    def update_settings(self, **values) -> None:
        """Validate and commit several settings at once."""
        if not values:
            return
        with self._lock:
            self.settings_repo.update(values)
        logger.debug("updated settings %s", ", ".join(sorted(values)))
        self._notify(ChangeEvent(ChangeKind.SETTINGS_CHANGED, keys=tuple(sorted(values))))

    def reload_settings(self) -> dict:
        """Pick up values edited in the YAML mirror.

        An invalid file is ignored and the stored settings are kept.
        Returns the settings that changed.
        """
        with self._lock:
            changed = self.settings_repo.reload()
        if changed:
            keys = tuple(sorted(changed))
            logger.debug("reloaded settings %s", ", ".join(keys))
            self._notify(ChangeEvent(ChangeKind.SETTINGS_CHANGED, keys=keys))
        return changed
