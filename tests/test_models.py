import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import (
    DistanceUnit,
    ExerciseCategory,
    WeightUnit,
    WorkoutRecord,
    WorkoutSetDetail,
    local_day,
    to_local_naive,
)
from localization import Translator


class WorkoutSetDetailTestCase(unittest.TestCase):
    def test_weight_and_reps(self) -> None:
        detail = WorkoutSetDetail(weight=60, reps=10)
        self.assertEqual(detail.description, "60.0 kg × 10 reps")

    def test_reps_only(self) -> None:
        self.assertEqual(WorkoutSetDetail(reps=12).description, "12 reps")

    def test_reps_win_over_distance(self) -> None:
        detail = WorkoutSetDetail(reps=5, distance=1.0, duration=300)
        self.assertEqual(detail.description, "5 reps")

    def test_distance_and_duration(self) -> None:
        detail = WorkoutSetDetail(distance=5.0, duration=1830)
        self.assertEqual(detail.description, "5.0 km / 30 min")

    def test_distance_only(self) -> None:
        self.assertEqual(WorkoutSetDetail(distance=2.34).description, "2.3 km")

    def test_duration_only(self) -> None:
        self.assertEqual(WorkoutSetDetail(duration=45).description, "45 sec")

    def test_weight_without_reps_is_ignored(self) -> None:
        self.assertEqual(WorkoutSetDetail(weight=20).description, "")

    def test_empty(self) -> None:
        self.assertEqual(WorkoutSetDetail().description, "")

    def test_describe_in_display_units(self) -> None:
        detail = WorkoutSetDetail(weight=100, reps=5)
        self.assertEqual(detail.describe(WeightUnit.LB), "220.5 lb × 5 reps")
        run = WorkoutSetDetail(distance=10.0, duration=3600)
        self.assertEqual(
            run.describe(distance_unit=DistanceUnit.MILE), "6.2 mi / 60 min"
        )
        self.assertEqual(run.describe("kg", "km"), "10.0 km / 60 min")


class WorkoutRecordTestCase(unittest.TestCase):
    def _record(self, **kwargs) -> WorkoutRecord:
        data = dict(
            exercise_name="Push-ups",
            category=ExerciseCategory.UPPER_BODY,
            sets=3,
            duration_minutes=15,
            xp_earned=45,
            timestamp=datetime.datetime(2026, 10, 19, 8, 30),
        )
        data.update(kwargs)
        return WorkoutRecord(**data)

    def test_ids_are_generated_and_unique(self) -> None:
        ids = {self._record().id for _ in range(50)}
        self.assertEqual(len(ids), 50)

    def test_day_uses_calendar_date(self) -> None:
        rec = self._record(timestamp=datetime.datetime(2026, 10, 18, 23, 59))
        self.assertEqual(rec.day, datetime.date(2026, 10, 18))

    def test_records_are_immutable(self) -> None:
        rec = self._record()
        with self.assertRaises(Exception):
            rec.sets = 4

    def test_aware_timestamps_become_local(self) -> None:
        aware = datetime.datetime(2026, 10, 19, 12, 0, tzinfo=datetime.timezone.utc)
        naive = to_local_naive(aware)
        self.assertIsNone(naive.tzinfo)
        self.assertEqual(naive, aware.astimezone().replace(tzinfo=None))
        self.assertEqual(local_day(aware), naive.date())


class ExerciseCategoryTestCase(unittest.TestCase):
    def test_every_category_has_icon_and_label(self) -> None:
        for category in ExerciseCategory:
            self.assertTrue(category.icon)
            self.assertTrue(category.label)
        self.assertEqual(ExerciseCategory.UPPER_BODY.label, "Upper body")

    def test_translated_labels(self) -> None:
        tr = Translator("ja")
        self.assertEqual(tr.category_label(ExerciseCategory.CARDIO), "有酸素")
        tr.set_language("en")
        self.assertEqual(tr.category_label(ExerciseCategory.CORE), "Core")


if __name__ == "__main__":
    unittest.main()
