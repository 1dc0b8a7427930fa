from __future__ import annotations

import datetime
import logging
from typing import Iterable, Mapping

from errors import (
    EmptySessionError,
    IndexOutOfRangeError,
    NotFoundError,
    SessionActiveError,
)
from models import (
    AppState,
    Category,
    PRNotice,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)
from record_service import RecordService

logger = logging.getLogger(__name__)


class SessionService:
    """Lifecycle of the single in-progress workout."""

    def __init__(
        self,
        state: AppState,
        records: RecordService | None = None,
        strict: bool = True,
    ) -> None:
        self.state = state
        self.records = records or RecordService()
        self.strict = strict

    def _session(self) -> Workout:
        if self.state.current_workout is None:
            raise NotFoundError("no workout in progress")
        return self.state.current_workout

    @staticmethod
    def _exercise_at(session: Workout, index: int) -> WorkoutExercise:
        if not 0 <= index < len(session.exercises):
            raise IndexOutOfRangeError(f"no exercise at position {index}")
        return session.exercises[index]

    @staticmethod
    def _raw_set(raw: object) -> dict:
        if isinstance(raw, WorkoutSet):
            return raw.model_dump()
        if isinstance(raw, Mapping):
            return dict(raw)
        # unreadable entries still count as a set, with every value 0
        return {}

    def begin(self, workout: Workout) -> Workout:
        """Install ``workout`` as the current session."""
        if self.state.current_workout is not None:
            if self.strict:
                raise SessionActiveError("finish or discard the current workout first")
            logger.warning(
                "replacing unfinished workout %s", self.state.current_workout.id
            )
        self.state.current_workout = workout
        logger.info("started workout %s for %s", workout.id, workout.date)
        return workout

    def start_session(self, date: datetime.date) -> Workout:
        return self.begin(Workout(date=date))

    def discard_session(self) -> None:
        session = self._session()
        self.state.current_workout = None
        logger.info("discarded workout %s", session.id)

    def add_exercise(self, exercise_id: str) -> WorkoutExercise:
        session = self._session()
        exercise = self.state.find_exercise(exercise_id)
        if exercise is None:
            raise NotFoundError(f"exercise {exercise_id} not found")
        if exercise.category == Category.CARDIO:
            sets = [WorkoutSet() for _ in range(exercise.default_sets)]
        else:
            sets = [
                WorkoutSet(reps=exercise.default_reps)
                for _ in range(exercise.default_sets)
            ]
        entry = WorkoutExercise(
            exercise_id=exercise.id,
            name=exercise.name,
            category=exercise.category,
            sets=sets,
        )
        session.exercises.append(entry)
        return entry

    def remove_exercise(self, index: int) -> None:
        session = self._session()
        self._exercise_at(session, index)
        del session.exercises[index]

    def log_sets(
        self, exercise_index: int, sets: Iterable[Mapping | WorkoutSet]
    ) -> WorkoutExercise:
        """Replace the sets of an exercise with user-entered values."""
        session = self._session()
        exercise = self._exercise_at(session, exercise_index)
        parsed = [
            WorkoutSet.from_raw(self._raw_set(raw), exercise.category) for raw in sets
        ]
        exercise.sets = parsed
        return exercise

    def add_set(self, exercise_index: int) -> WorkoutSet:
        """Append a set copying the last one."""
        session = self._session()
        exercise = self._exercise_at(session, exercise_index)
        if exercise.sets:
            new_set = exercise.sets[-1].numbers_only()
        elif exercise.is_cardio:
            new_set = WorkoutSet()
        else:
            catalog = self.state.find_exercise(exercise.exercise_id)
            new_set = WorkoutSet(reps=catalog.default_reps if catalog else 10)
        exercise.sets.append(new_set)
        return new_set

    def remove_set(self, exercise_index: int, set_index: int) -> None:
        session = self._session()
        exercise = self._exercise_at(session, exercise_index)
        if not 0 <= set_index < len(exercise.sets):
            raise IndexOutOfRangeError(f"no set at position {set_index}")
        del exercise.sets[set_index]

    def set_notes(self, text: str) -> None:
        self._session().notes = text or ""

    def set_exercise_notes(self, index: int, text: str) -> None:
        exercise = self._exercise_at(self._session(), index)
        exercise.notes = text or ""

    def finish_session(self) -> tuple[Workout, list[PRNotice]]:
        session = self._session()
        if not session.exercises:
            raise EmptySessionError("add at least one exercise before finishing")
        records, notices = self.records.update_records(
            self.state.personal_records, session
        )
        self.state.personal_records = records
        self.state.workouts.insert(0, session)
        self.state.current_workout = None
        logger.info(
            "finished workout %s with %d exercises, %d new records",
            session.id,
            len(session.exercises),
            len(notices),
        )
        return session, notices
