from __future__ import annotations

import datetime
import logging
from typing import Iterable, Mapping, Optional

from db import (
    BodyWeightRepository,
    CurrentWorkoutRepository,
    ExerciseRepository,
    PersonalRecordRepository,
    SettingsRepository,
    TemplateRepository,
    WorkoutRepository,
)
from errors import InvalidInputError, NotFoundError
from models import (
    AppState,
    BodyWeightEntry,
    Exercise,
    Metric,
    PersonalRecord,
    PRNotice,
    ProgressPoint,
    ProgressStats,
    Summary,
    Template,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)
from body_weight_service import BodyWeightService
from catalog_service import CatalogService
from record_service import RecordService
from session_service import SessionService
from stats_service import ProgressSeries, StatisticsService
from template_service import TemplateService

logger = logging.getLogger(__name__)

DateLike = datetime.date | datetime.datetime | str | None


def parse_date(value: DateLike) -> datetime.date:
    """Return ``value`` as a calendar date, defaulting to today."""
    if value is None or value == "":
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidInputError(f"invalid date {value!r}")


class WorkoutTracker:
    """Owns the application state and runs every operation against it.

    State is loaded once from the database. After each successful mutation
    the collections it touched are written back in full.
    """

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.exercise_repo = ExerciseRepository(db_path)
        self.workout_repo = WorkoutRepository(db_path)
        self.current_repo = CurrentWorkoutRepository(db_path)
        self.template_repo = TemplateRepository(db_path)
        self.body_weight_repo = BodyWeightRepository(db_path)
        self.record_repo = PersonalRecordRepository(db_path)
        self.state = self.load_state()
        self.records = RecordService(self.settings.get_text("weight_unit", "lbs"))
        self.sessions = SessionService(
            self.state,
            self.records,
            strict=self.settings.get_bool("strict_session_start", True),
        )
        self.templates = TemplateService()
        self.statistics = StatisticsService(
            weekly_days=self.settings.get_int("weekly_window_days", 7),
            monthly_days=self.settings.get_int("monthly_window_days", 30),
        )
        self.catalog = CatalogService(self.state)
        self.body_weights = BodyWeightService(self.state)

    def load_state(self) -> AppState:
        return AppState(
            exercises=self.exercise_repo.load(),
            workouts=self.workout_repo.load(),
            current_workout=self.current_repo.load(),
            templates=self.template_repo.load(),
            body_weight_log=self.body_weight_repo.load(),
            personal_records=self.record_repo.load(),
        )

    def _persist(self, *collections: str) -> None:
        """Write the named collections back in a single transaction."""
        sources = {
            "exercises": (self.exercise_repo, self.state.exercises),
            "workouts": (self.workout_repo, self.state.workouts),
            "current": (self.current_repo, self.state.current_workout),
            "templates": (self.template_repo, self.state.templates),
            "body_weight": (self.body_weight_repo, self.state.body_weight_log),
            "records": (self.record_repo, self.state.personal_records),
        }
        self.workout_repo.save_many(sources[name] for name in collections)

    # session

    @property
    def current_workout(self) -> Optional[Workout]:
        return self.state.current_workout

    def start_session(self, date: DateLike = None) -> Workout:
        workout = self.sessions.start_session(parse_date(date))
        self._persist("current")
        return workout

    def discard_session(self) -> None:
        self.sessions.discard_session()
        self._persist("current")

    def add_exercise(self, exercise_id: str) -> WorkoutExercise:
        entry = self.sessions.add_exercise(exercise_id)
        self._persist("current")
        return entry

    def remove_exercise(self, index: int) -> None:
        self.sessions.remove_exercise(index)
        self._persist("current")

    def log_sets(
        self, exercise_index: int, sets: Iterable[Mapping | WorkoutSet]
    ) -> WorkoutExercise:
        exercise = self.sessions.log_sets(exercise_index, sets)
        self._persist("current")
        return exercise

    def add_set(self, exercise_index: int) -> WorkoutSet:
        new_set = self.sessions.add_set(exercise_index)
        self._persist("current")
        return new_set

    def remove_set(self, exercise_index: int, set_index: int) -> None:
        self.sessions.remove_set(exercise_index, set_index)
        self._persist("current")

    def set_notes(self, text: str) -> None:
        self.sessions.set_notes(text)
        self._persist("current")

    def set_exercise_notes(self, index: int, text: str) -> None:
        self.sessions.set_exercise_notes(index, text)
        self._persist("current")

    def finish_session(self) -> tuple[Workout, list[PRNotice]]:
        workouts = list(self.state.workouts)
        records = self.state.personal_records
        current = self.state.current_workout
        workout, notices = self.sessions.finish_session()
        try:
            self._persist("workouts", "records", "current")
        except Exception:
            # keep memory in step with the database, which rolled back
            self.state.workouts = workouts
            self.state.personal_records = records
            self.state.current_workout = current
            logger.exception("could not store finished workout %s", workout.id)
            raise
        return workout, notices

    # history

    def list_workouts(self, limit: Optional[int] = None) -> list[Workout]:
        if limit is None:
            return list(self.state.workouts)
        return self.state.workouts[:limit]

    def get_workout(self, workout_id: str) -> Workout:
        workout = self.state.find_workout(workout_id)
        if workout is None:
            raise NotFoundError(f"workout {workout_id} not found")
        return workout

    def repeat_workout(self, workout_id: str, date: DateLike = None) -> Workout:
        source = self.get_workout(workout_id)
        workout = self.sessions.begin(
            self.templates.repeat_workout(source, parse_date(date))
        )
        self._persist("current")
        return workout

    # templates

    def list_templates(self) -> list[Template]:
        return list(self.state.templates)

    def get_template(self, template_id: str) -> Template:
        template = self.state.find_template(template_id)
        if template is None:
            raise NotFoundError(f"template {template_id} not found")
        return template

    def save_template(self, name: str) -> Template:
        session = self.state.current_workout
        if session is None:
            raise NotFoundError("no workout in progress")
        template = self.templates.save_template(session, name)
        self.state.templates.append(template)
        self._persist("templates")
        return template

    def load_template(self, template_id: str, date: DateLike = None) -> Workout:
        template = self.get_template(template_id)
        workout = self.sessions.begin(
            self.templates.load_template(template, parse_date(date))
        )
        self._persist("current")
        return workout

    def delete_template(self, template_id: str) -> None:
        self.state.templates = self.templates.delete_template(
            self.state.templates, template_id
        )
        self._persist("templates")

    # catalog

    def list_exercises(self, category: Optional[str] = None) -> list[Exercise]:
        return self.catalog.list_exercises(category)

    def create_exercise(
        self,
        name: str,
        category: str,
        default_sets: object = None,
        default_reps: object = None,
    ) -> Exercise:
        exercise = self.catalog.create_exercise(
            name, category, default_sets, default_reps
        )
        self._persist("exercises")
        return exercise

    def delete_exercise(self, exercise_id: str) -> None:
        self.catalog.delete_exercise(exercise_id)
        self._persist("exercises")

    # records

    def get_record(self, name: str, metric: Metric | str) -> Optional[PersonalRecord]:
        try:
            key = (name, Metric(metric))
        except ValueError:
            raise InvalidInputError(f"unknown metric {metric}")
        return self.state.personal_records.get(key)

    def records_for(self, exercise_name: str) -> list[PersonalRecord]:
        return self.records.records_for(self.state.personal_records, exercise_name)

    def list_records(self) -> list[PersonalRecord]:
        return sorted(
            self.state.personal_records.values(),
            key=lambda r: (r.exercise_name, r.metric.value),
        )

    # analytics

    def weekly_summary(self, now: datetime.datetime | None = None) -> Summary:
        return self.statistics.weekly_summary(
            self.state.workouts, now or datetime.datetime.now()
        )

    def monthly_summary(self, now: datetime.datetime | None = None) -> Summary:
        return self.statistics.monthly_summary(
            self.state.workouts, now or datetime.datetime.now()
        )

    def current_streak(self, today: DateLike = None) -> int:
        return self.statistics.current_streak(self.state.workouts, parse_date(today))

    def longest_streak(self) -> int:
        return self.statistics.longest_streak(self.state.workouts)

    def progress_series(self, exercise_name: str, metric: Metric | str) -> ProgressSeries:
        try:
            metric = Metric(metric)
        except ValueError:
            raise InvalidInputError(f"unknown metric {metric}")
        return self.statistics.progress_series(
            self.state.workouts, exercise_name, metric
        )

    def progress(
        self, exercise_name: str, metric: Metric | str
    ) -> tuple[list[ProgressPoint], Optional[ProgressStats]]:
        points = list(self.progress_series(exercise_name, metric))
        return points, self.statistics.progress_stats(points)

    def exercises_with_data(self) -> list[str]:
        return self.statistics.exercises_with_data(self.state.workouts)

    # body weight

    def log_body_weight(self, weight: object, date: DateLike = None) -> BodyWeightEntry:
        entry = self.body_weights.log(parse_date(date), weight)
        self._persist("body_weight")
        return entry

    def delete_body_weight(self, date: DateLike) -> None:
        self.body_weights.delete(parse_date(date))
        self._persist("body_weight")

    def get_weight_history(self, limit: Optional[int] = None) -> list[BodyWeightEntry]:
        if limit is None:
            limit = self.settings.get_int("weight_history_limit", 30)
        return self.body_weights.history(limit)
