import os
import sqlite3
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import Database, WorkoutRecordRepository


class TestSchemaMigration:
    def test_rebuilds_outdated_table(self, tmp_path):
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(str(db_file))
        conn.execute(
            "CREATE TABLE workout_records (position INTEGER PRIMARY KEY AUTOINCREMENT, id TEXT, exercise_name TEXT, category TEXT, sets INTEGER, duration_minutes INTEGER, xp_earned INTEGER, timestamp TEXT, notes TEXT)"
        )
        conn.execute(
            "INSERT INTO workout_records (id, exercise_name, category, sets, duration_minutes, xp_earned, timestamp, notes) "
            "VALUES ('abc', 'Squats', 'lower_body', 4, 20, 60, '2026-10-18T08:00:00', 'legacy')"
        )
        conn.execute("CREATE TABLE workout_records_old (id INTEGER)")
        conn.commit()
        conn.close()

        Database(str(db_file))

        conn = sqlite3.connect(str(db_file))
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='workout_records_old'"
        )
        assert cur.fetchone() is None
        cur = conn.execute("PRAGMA table_info(workout_records)")
        cols = [row[1] for row in cur.fetchall()]
        assert "notes" not in cols
        conn.close()

        records = WorkoutRecordRepository(str(db_file)).fetch_all_records()
        assert [r.id for r in records] == ["abc"]
        assert records[0].exercise_name == "Squats"

    def test_default_settings_seeded(self, tmp_path):
        db_file = tmp_path / "fresh.db"
        Database(str(db_file))
        conn = sqlite3.connect(str(db_file))
        rows = dict(conn.execute("SELECT key, value FROM settings").fetchall())
        conn.close()
        assert rows["weekly_workout_goal"] == "3"
        assert rows["notifications_enabled"] == "1"
