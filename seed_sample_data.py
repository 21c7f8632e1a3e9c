import datetime

from app_data import AppData
from models import ExerciseCategory, WorkoutRecord

SAMPLE_WORKOUTS = [
    ("Push-ups", ExerciseCategory.UPPER_BODY, 3, 15, 45),
    ("Squats", ExerciseCategory.LOWER_BODY, 4, 20, 60),
    ("Plank", ExerciseCategory.CORE, 3, 12, 36),
    ("Running", ExerciseCategory.CARDIO, 1, 30, 90),
    ("Dumbbell bench press", ExerciseCategory.UPPER_BODY, 4, 25, 75),
    ("Lunges", ExerciseCategory.LOWER_BODY, 3, 18, 54),
    ("Crunches", ExerciseCategory.CORE, 3, 10, 30),
]


def sample_records(now: datetime.datetime | None = None) -> list[WorkoutRecord]:
    """Return one demo workout per day, from ``now`` back six days."""
    now = now or datetime.datetime.now()
    return [
        WorkoutRecord(
            exercise_name=name,
            category=category,
            sets=sets,
            duration_minutes=minutes,
            xp_earned=xp,
            timestamp=now - datetime.timedelta(days=offset),
        )
        for offset, (name, category, sets, minutes, xp) in enumerate(SAMPLE_WORKOUTS)
    ]


def seed(app: AppData | None = None, now: datetime.datetime | None = None) -> int:
    app = app or AppData()
    if app.store.records():
        print("Store already contains workouts")
        return 0
    records = sample_records(now)
    for record in records:
        app.add_record(record)
    print("Seed data inserted")
    return len(records)


if __name__ == "__main__":
    seed()
