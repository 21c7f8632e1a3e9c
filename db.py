import sqlite3
import datetime
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import yaml

from config import DEFAULT_DB_PATH, DEFAULT_YAML_PATH, YamlConfig
from errors import NotFoundError, ValidationError
from models import ExerciseCategory, WorkoutRecord, WorkoutSetDetail
from settings_schema import DEFAULT_SETTINGS, SETTING_KEYS, validate_settings

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "workout_records": (
            """CREATE TABLE workout_records (
                    position INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    exercise_name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    sets INTEGER NOT NULL,
                    duration_minutes INTEGER NOT NULL,
                    xp_earned INTEGER NOT NULL,
                    timestamp TEXT NOT NULL
                );""",
            [
                "position",
                "id",
                "exercise_name",
                "category",
                "sets",
                "duration_minutes",
                "xp_earned",
                "timestamp",
            ],
        ),
        "set_details": (
            """CREATE TABLE set_details (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    record_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    weight REAL,
                    reps INTEGER,
                    duration INTEGER,
                    distance REAL
                );""",
            ["id", "record_id", "position", "weight", "reps", "duration", "distance"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;")
        conn.execute(f"DROP TABLE {table}_old;")

    def _init_settings(self) -> None:
        with self._connection() as conn:
            for key, value in DEFAULT_SETTINGS.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, _to_text(value)),
                )


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


def _to_text(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _write_settings(conn: sqlite3.Connection, data: dict) -> None:
    for key, value in data.items():
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, _to_text(value)),
        )


class WorkoutRecordRepository(BaseRepository):
    """Repository for logged workout records and their set details."""

    _COLUMNS = "id, exercise_name, category, sets, duration_minutes, xp_earned, timestamp"

    def _insert(self, conn: sqlite3.Connection, record: WorkoutRecord) -> None:
        conn.execute(
            f"INSERT INTO workout_records ({self._COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?);",
            (
                record.id,
                record.exercise_name,
                record.category.value,
                record.sets,
                record.duration_minutes,
                record.xp_earned,
                record.timestamp.isoformat(),
            ),
        )
        for idx, detail in enumerate(record.details):
            conn.execute(
                "INSERT INTO set_details (record_id, position, weight, reps, duration, distance) "
                "VALUES (?, ?, ?, ?, ?, ?);",
                (
                    record.id,
                    idx,
                    detail.weight,
                    detail.reps,
                    detail.duration,
                    detail.distance,
                ),
            )

    def exists(self, record_id: str) -> bool:
        rows = self.fetch_all(
            "SELECT 1 FROM workout_records WHERE id = ?;", (record_id,)
        )
        return bool(rows)

    def add(self, record: WorkoutRecord) -> None:
        if self.exists(record.id):
            raise ValidationError("record id already exists")
        with self._connection() as conn:
            self._insert(conn, record)
        logger.debug("stored workout record %s", record.id)

    def delete(self, record_id: str) -> None:
        if not self.exists(record_id):
            raise NotFoundError("record not found")
        with self._connection() as conn:
            conn.execute("DELETE FROM set_details WHERE record_id = ?;", (record_id,))
            conn.execute("DELETE FROM workout_records WHERE id = ?;", (record_id,))
        logger.debug("deleted workout record %s", record_id)

    def delete_all(self) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM set_details;")
            conn.execute("DELETE FROM workout_records;")

    def reset(self, settings: dict) -> None:
        """Remove every record and overwrite the settings in one transaction."""
        with self._connection() as conn:
            conn.execute("DELETE FROM set_details;")
            conn.execute("DELETE FROM workout_records;")
            _write_settings(conn, settings)

    def import_records(
        self,
        records: Iterable[WorkoutRecord],
        settings: dict,
        merge: bool = False,
    ) -> int:
        """Write imported records and settings atomically.

        Without ``merge`` the existing records are replaced. With ``merge``
        records whose id is already stored are skipped. Returns the number of
        records inserted.
        """
        inserted = 0
        with self._connection() as conn:
            if merge:
                known = {
                    r[0] for r in conn.execute("SELECT id FROM workout_records;")
                }
            else:
                conn.execute("DELETE FROM set_details;")
                conn.execute("DELETE FROM workout_records;")
                known = set()
            for record in records:
                if record.id in known:
                    continue
                self._insert(conn, record)
                known.add(record.id)
                inserted += 1
            _write_settings(conn, settings)
        logger.debug("imported %d workout records (merge=%s)", inserted, merge)
        return inserted

    def _fetch_details(self, record_id: Optional[str] = None) -> dict[str, list]:
        query = "SELECT record_id, weight, reps, duration, distance FROM set_details"
        params: tuple = ()
        if record_id is not None:
            query += " WHERE record_id = ?"
            params = (record_id,)
        query += " ORDER BY record_id, position;"
        by_record: dict[str, list] = {}
        for rid, weight, reps, duration, distance in self.fetch_all(query, params):
            by_record.setdefault(rid, []).append(
                WorkoutSetDetail(
                    weight=weight, reps=reps, duration=duration, distance=distance
                )
            )
        return by_record

    @staticmethod
    def _row_to_record(row: Tuple, details: list) -> WorkoutRecord:
        rid, name, category, sets, minutes, xp, ts = row
        return WorkoutRecord(
            id=rid,
            exercise_name=name,
            category=ExerciseCategory(category),
            sets=int(sets),
            duration_minutes=int(minutes),
            xp_earned=int(xp),
            timestamp=datetime.datetime.fromisoformat(ts),
            details=tuple(details),
        )

    def fetch(self, record_id: str) -> WorkoutRecord:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM workout_records WHERE id = ?;",
            (record_id,),
        )
        if not rows:
            raise NotFoundError("record not found")
        details = self._fetch_details(record_id)
        return self._row_to_record(rows[0], details.get(record_id, []))

    def fetch_all_records(self) -> List[WorkoutRecord]:
        """Return every record in insertion order."""
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM workout_records ORDER BY position;"
        )
        details = self._fetch_details()
        return [self._row_to_record(row, details.get(row[0], [])) for row in rows]


class SettingsRepository(BaseRepository):
    """Repository for user settings synchronized with YAML."""

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        yaml_path: str | None = DEFAULT_YAML_PATH,
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path) if yaml_path else None
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        return {k: v for k, v in rows if k in SETTING_KEYS}

    def _sync_from_yaml(self) -> dict:
        """Copy valid values edited in the YAML file into the database.

        An unreadable or invalid file leaves the stored settings untouched.
        Returns the settings that changed.
        """
        if self._yaml is None:
            return {}
        stored = validate_settings(self._raw_all_settings())
        try:
            data = self._yaml.load()
            merged = validate_settings({**stored, **data})
        except (ValueError, yaml.YAMLError) as e:
            logger.warning("ignoring settings in %s: %s", self._yaml.path, e)
            return {}
        changed = {k: v for k, v in merged.items() if stored.get(k) != v}
        if changed:
            with self._connection() as conn:
                _write_settings(conn, changed)
        return changed

    def _sync_to_yaml(self) -> None:
        if self._yaml is None:
            return
        self._yaml.save(validate_settings(self._raw_all_settings()))

    def all_settings(self) -> dict:
        return validate_settings(self._raw_all_settings())

    def get(self, key: str):
        if key not in SETTING_KEYS:
            raise ValidationError(f"unknown setting: {key}")
        return self.all_settings()[key]

    def update(self, values: dict) -> dict:
        """Validate ``values`` against the current settings and commit them together.

        Returns the settings that actually changed.
        """
        unknown = [k for k in values if k not in SETTING_KEYS]
        if unknown:
            raise ValidationError(f"unknown setting: {unknown[0]}")
        current = self.all_settings()
        merged = validate_settings({**current, **values})
        changed = {k: merged[k] for k in values if current.get(k) != merged[k]}
        if changed:
            with self._connection() as conn:
                _write_settings(conn, changed)
            self._sync_to_yaml()
        return changed

    def sync(self) -> None:
        """Write the stored settings back to the YAML mirror."""
        self._sync_to_yaml()

    def reload(self) -> dict:
        """Re-read the YAML file and rewrite it from the stored settings."""
        changed = self._sync_from_yaml()
        self._sync_to_yaml()
        return changed
