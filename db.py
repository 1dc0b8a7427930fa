import sqlite3
import csv
import os
import json
import logging
from contextlib import contextmanager
from typing import Any, Iterable, List, Tuple, Optional

from config import YamlConfig
from settings_schema import DEFAULT_SETTINGS, validate_settings
from models import (
    BodyWeightEntry,
    Exercise,
    PersonalRecord,
    RecordKey,
    Template,
    Workout,
)

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "collections": (
            """CREATE TABLE collections (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["name", "value"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._import_exercise_catalog_data()
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

        logger.info("migrating table %s from columns %s", table, existing_cols)
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;")
        conn.execute(f"DROP TABLE {table}_old;")

    def _import_exercise_catalog_data(self) -> None:
        """Seed the exercise catalog on first run."""
        csv_path = os.path.join(os.path.dirname(__file__), "default_exercises.csv")
        if not os.path.exists(csv_path):
            return
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM collections WHERE name = ?;",
                (ExerciseRepository.collection,),
            ).fetchone()
            if row is not None:
                return
            with open(csv_path, newline="", encoding="utf-8") as csvfile:
                reader = csv.DictReader(csvfile)
                records = [
                    Exercise(
                        id=row["Exercise ID"],
                        name=row["Exercise Name"],
                        category=row["Category"],
                        default_sets=int(row["Default Sets"]),
                        default_reps=int(row["Default Reps"]),
                        is_custom=False,
                    ).model_dump(mode="json")
                    for row in reader
                ]
            conn.execute(
                "INSERT OR IGNORE INTO collections (name, value) VALUES (?, ?);",
                (ExerciseRepository.collection, json.dumps(records)),
            )
        logger.info("seeded exercise catalog with %d exercises", len(records))

    def _init_settings(self) -> None:
        with self._connection() as conn:
            for key, value in DEFAULT_SETTINGS.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, _to_text(value)),
                )

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class CollectionRepository(BaseRepository):
    """Stores one named collection as a single JSON document.

    Every save overwrites the whole collection, so a failed write never leaves
    a half-written record behind.
    """

    collection: str = ""

    _UPSERT = (
        "INSERT INTO collections (name, value) VALUES (?, ?) "
        "ON CONFLICT(name) DO UPDATE SET value=excluded.value;"
    )

    def exists(self) -> bool:
        rows = self.fetch_all(
            "SELECT 1 FROM collections WHERE name = ?;", (self.collection,)
        )
        return bool(rows)

    def load_raw(self) -> Any:
        rows = self.fetch_all(
            "SELECT value FROM collections WHERE name = ?;", (self.collection,)
        )
        if not rows:
            return None
        return json.loads(rows[0][0])

    def dump(self, value: Any) -> Any:
        """Return ``value`` as JSON-compatible data."""
        return value

    def save_raw(self, data: Any) -> None:
        self.execute(self._UPSERT, (self.collection, json.dumps(data)))
        logger.debug("saved collection %s", self.collection)

    def save(self, value: Any) -> None:
        self.save_raw(self.dump(value))

    def save_many(self, writes: Iterable[Tuple["CollectionRepository", Any]]) -> None:
        """Save several collections in one transaction.

        Either every collection in ``writes`` is stored or none is.
        """
        with self._connection() as conn:
            names = []
            for repo, value in writes:
                conn.execute(
                    self._UPSERT, (repo.collection, json.dumps(repo.dump(value)))
                )
                names.append(repo.collection)
        logger.debug("saved collections %s", ", ".join(names))

    def delete(self) -> None:
        self.execute("DELETE FROM collections WHERE name = ?;", (self.collection,))


class ExerciseRepository(CollectionRepository):
    """Repository for the exercise catalog."""

    collection = "exercises"

    def load(self) -> list[Exercise]:
        return [Exercise.model_validate(item) for item in self.load_raw() or []]

    def dump(self, exercises: list[Exercise]) -> list[dict]:
        return [e.model_dump(mode="json") for e in exercises]


class WorkoutRepository(CollectionRepository):
    """Repository for finished workouts, most recent first."""

    collection = "workouts"

    def load(self) -> list[Workout]:
        return [Workout.model_validate(item) for item in self.load_raw() or []]

    def dump(self, workouts: list[Workout]) -> list[dict]:
        return [w.model_dump(mode="json") for w in workouts]


class CurrentWorkoutRepository(CollectionRepository):
    """Repository for the in-progress workout slot."""

    collection = "currentWorkout"

    def load(self) -> Optional[Workout]:
        data = self.load_raw()
        if not data:
            return None
        return Workout.model_validate(data)

    def dump(self, workout: Optional[Workout]) -> Optional[dict]:
        return workout.model_dump(mode="json") if workout else None


class TemplateRepository(CollectionRepository):
    """Repository for workout templates."""

    collection = "templates"

    def load(self) -> list[Template]:
        return [Template.model_validate(item) for item in self.load_raw() or []]

    def dump(self, templates: list[Template]) -> list[dict]:
        return [t.model_dump(mode="json") for t in templates]


class BodyWeightRepository(CollectionRepository):
    """Repository for body weight logs."""

    collection = "bodyWeightLog"

    def load(self) -> list[BodyWeightEntry]:
        return [BodyWeightEntry.model_validate(item) for item in self.load_raw() or []]

    def dump(self, entries: list[BodyWeightEntry]) -> list[dict]:
        return [e.model_dump(mode="json") for e in entries]


class PersonalRecordRepository(CollectionRepository):
    """Repository for personal records.

    Records are stored as a list and keyed by ``(exercise_name, metric)`` in
    memory, so exercise names may contain any character.
    """

    collection = "personalRecords"

    def load(self) -> dict[RecordKey, PersonalRecord]:
        records = [
            PersonalRecord.model_validate(item) for item in self.load_raw() or []
        ]
        return {r.key: r for r in records}

    def dump(self, records: dict[RecordKey, PersonalRecord]) -> list[dict]:
        ordered = sorted(records.values(), key=lambda r: (r.exercise_name, r.metric.value))
        return [r.model_dump(mode="json") for r in ordered]


class SettingsRepository(BaseRepository):
    """Repository for application settings synchronized with YAML."""

    _BOOL_KEYS = {k for k, v in DEFAULT_SETTINGS.items() if isinstance(v, bool)}

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, Any] = {}
        for k, v in rows:
            if k in self._BOOL_KEYS:
                result[k] = v in {"1", "1.0", "true", "True"}
                continue
            default = DEFAULT_SETTINGS.get(k)
            if isinstance(default, int):
                try:
                    result[k] = int(float(v))
                except ValueError:
                    result[k] = default
                continue
            result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, _to_text(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        return self.get_text(key, "1" if default else "0") in {
            "1",
            "true",
            "True",
            "1.0",
        }

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def set_bool(self, key: str, value: bool) -> None:
        self.set_text(key, "1" if value else "0")

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()
