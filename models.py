"""Value types shared by the record store, statistics and transfer layers."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from enum import Enum

from algorithms import DistanceConverter, WeightConverter

# Largest value an SQLite INTEGER column holds.
MAX_INTEGER = 2**63 - 1


class ExerciseCategory(str, Enum):
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    CORE = "core"
    CARDIO = "cardio"

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


_CATEGORY_ICONS = {
    ExerciseCategory.UPPER_BODY: "figure.strengthtraining.traditional",
    ExerciseCategory.LOWER_BODY: "figure.step.training",
    ExerciseCategory.CORE: "figure.core.training",
    ExerciseCategory.CARDIO: "figure.run",
}


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class DistanceUnit(str, Enum):
    KM = "km"
    MILE = "mile"


class AppearanceMode(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class WorkoutSetDetail:
    """One measured set. Weight is stored in kg, distance in km."""

    weight: float | None = None
    reps: int | None = None
    duration: int | None = None
    distance: float | None = None

    @property
    def description(self) -> str:
        return self.describe()

    def describe(
        self,
        weight_unit: WeightUnit = WeightUnit.KG,
        distance_unit: DistanceUnit = DistanceUnit.KM,
    ) -> str:
        """Return a human readable summary in the requested display units."""
        weight = self.weight
        if weight is not None and weight_unit == WeightUnit.LB:
            weight = WeightConverter.kg_to_lb(weight)
        distance = self.distance
        if distance is not None and distance_unit == DistanceUnit.MILE:
            distance = DistanceConverter.km_to_mile(distance)
        w_label = WeightUnit(weight_unit).value
        d_label = "mi" if distance_unit == DistanceUnit.MILE else "km"

        if weight is not None and self.reps is not None:
            return f"{weight:.1f} {w_label} × {self.reps} reps"
        if self.reps is not None:
            return f"{self.reps} reps"
        if distance is not None and self.duration is not None:
            return f"{distance:.1f} {d_label} / {self.duration // 60} min"
        if distance is not None:
            return f"{distance:.1f} {d_label}"
        if self.duration is not None:
            return f"{self.duration} sec"
        return ""


def _new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class WorkoutRecord:
    """A logged workout. Records are never edited in place."""

    exercise_name: str
    category: ExerciseCategory
    sets: int
    duration_minutes: int
    xp_earned: int
    timestamp: datetime.datetime
    details: tuple[WorkoutSetDetail, ...] = ()
    id: str = field(default_factory=_new_record_id)

    @property
    def day(self) -> datetime.date:
        """Calendar day of the record in local civil time."""
        return local_day(self.timestamp)


def local_day(ts: datetime.datetime) -> datetime.date:
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def to_local_naive(ts: datetime.datetime) -> datetime.datetime:
    """Return ``ts`` as a naive datetime in local civil time."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)
