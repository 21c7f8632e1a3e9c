from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Dict, List, Sequence

from algorithms import MathTools
from localization import Translator
from models import ExerciseCategory, WorkoutRecord
from period_filter import ROLLING_WEEK_DAYS, reference_day


@dataclass(frozen=True)
class DayData:
    day: datetime.date
    label: str
    count: int


class StatisticsService:
    """Compute workout statistics over a set of records.

    Every method is a pure function of its arguments; nothing here reads
    from or writes to the store.
    """

    def __init__(self, translator: Translator | None = None) -> None:
        self.translator = translator or Translator()

    @staticmethod
    def count(records: Sequence[WorkoutRecord]) -> int:
        return len(records)

    @staticmethod
    def total_sets(records: Sequence[WorkoutRecord]) -> int:
        return sum(r.sets for r in records)

    @staticmethod
    def total_duration_minutes(records: Sequence[WorkoutRecord]) -> int:
        return sum(r.duration_minutes for r in records)

    @staticmethod
    def total_xp(records: Sequence[WorkoutRecord]) -> int:
        return sum(r.xp_earned for r in records)

    @staticmethod
    def category_breakdown(
        records: Sequence[WorkoutRecord],
    ) -> Dict[ExerciseCategory, int]:
        """Return the number of records per category, including empty ones."""
        result = {category: 0 for category in ExerciseCategory}
        for r in records:
            result[r.category] += 1
        return result

    @classmethod
    def category_percentage(
        cls, category: ExerciseCategory, records: Sequence[WorkoutRecord]
    ) -> float:
        """Return the share of ``records`` in ``category`` as a 0..1 ratio."""
        counts = cls.category_breakdown(records)
        return MathTools.ratio(counts[ExerciseCategory(category)], len(records))

    def daily_histogram(
        self,
        records: Sequence[WorkoutRecord],
        now: datetime.datetime | datetime.date | None = None,
    ) -> List[DayData]:
        """Return workout counts for the last seven days, oldest first.

        ``records`` should be the full history; the window is always the
        seven calendar days ending on ``now``.
        """
        today = reference_day(now)
        counts: Dict[datetime.date, int] = {}
        for r in records:
            counts[r.day] = counts.get(r.day, 0) + 1
        result: List[DayData] = []
        for offset in range(ROLLING_WEEK_DAYS - 1, -1, -1):
            day = today - datetime.timedelta(days=offset)
            result.append(
                DayData(
                    day=day,
                    label=self.translator.weekday_short(day),
                    count=counts.get(day, 0),
                )
            )
        return result

    def summary(self, records: Sequence[WorkoutRecord]) -> dict:
        """Return the headline totals shown for a period."""
        return {
            "workouts": self.count(records),
            "sets": self.total_sets(records),
            "minutes": self.total_duration_minutes(records),
            "xp": self.total_xp(records),
            "categories": {
                c.value: n for c, n in self.category_breakdown(records).items()
            },
        }
