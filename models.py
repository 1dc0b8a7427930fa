"""Domain entities of the workout tracker.

Entities are pydantic models so the repository layer can dump them to JSON and
validate them on load. ``AppState`` is the in-memory container the tracker
facade owns; nothing in the engine keeps module-level state.
"""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from tools import MathTools


class Category(str, Enum):
    WEIGHT = "weight"
    CARDIO = "cardio"
    BODYWEIGHT = "bodyweight"


class Metric(str, Enum):
    WEIGHT = "weight"
    VOLUME = "volume"
    REPS = "reps"
    DURATION = "duration"
    CALORIES = "calories"


RECORD_METRICS = (Metric.WEIGHT, Metric.VOLUME)

RecordKey = tuple[str, Metric]


def generate_id() -> str:
    return uuid.uuid4().hex


class Exercise(BaseModel):
    """Catalog entry an exercise snapshot is taken from."""

    id: str
    name: str
    category: Category
    default_sets: int = Field(3, ge=1)
    default_reps: int = Field(10, ge=1)
    is_custom: bool = False


class WorkoutSet(BaseModel):
    """One set; strength sets use reps/weight, cardio sets duration/calories."""

    reps: int = Field(0, ge=0)
    weight: float = Field(0.0, ge=0)
    duration: float = Field(0.0, ge=0)
    calories: float = Field(0.0, ge=0)

    @classmethod
    def from_raw(cls, raw: dict, category: Category) -> "WorkoutSet":
        """Build a set from user-entered values for an exercise of ``category``."""
        if category == Category.CARDIO:
            return cls(
                duration=MathTools.parse_float(raw.get("duration")),
                calories=MathTools.parse_float(raw.get("calories")),
            )
        return cls(
            reps=MathTools.parse_int(raw.get("reps")),
            weight=MathTools.parse_float(raw.get("weight")),
        )

    def numbers_only(self) -> "WorkoutSet":
        return WorkoutSet(
            reps=self.reps,
            weight=self.weight,
            duration=self.duration,
            calories=self.calories,
        )


class WorkoutExercise(BaseModel):
    """Snapshot of an exercise inside a workout.

    ``name`` and ``category`` are copied from the catalog when the exercise is
    added, so later catalog changes never alter a finished workout.
    """

    exercise_id: str
    name: str
    category: Category
    notes: str = ""
    sets: list[WorkoutSet] = Field(default_factory=list)

    @property
    def is_cardio(self) -> bool:
        return self.category == Category.CARDIO

    def max_weight(self) -> float:
        return max((s.weight for s in self.sets), default=0.0)

    def total_volume(self) -> float:
        return MathTools.volume((s.reps, s.weight) for s in self.sets)

    def total_reps(self) -> int:
        return sum(s.reps for s in self.sets)

    def total_duration(self) -> float:
        return sum(s.duration for s in self.sets)

    def total_calories(self) -> float:
        return sum(s.calories for s in self.sets)

    def metric_value(self, metric: Metric) -> float:
        """Return ``metric`` for this exercise, 0 when the category does not track it."""
        if metric in (Metric.DURATION, Metric.CALORIES):
            if not self.is_cardio:
                return 0.0
            if metric == Metric.DURATION:
                return self.total_duration()
            return self.total_calories()
        if self.is_cardio:
            return 0.0
        if metric == Metric.WEIGHT:
            return self.max_weight()
        if metric == Metric.VOLUME:
            return self.total_volume()
        return float(self.total_reps())

    def snapshot(self) -> "WorkoutExercise":
        """Copy the structure and set values, dropping notes."""
        return WorkoutExercise(
            exercise_id=self.exercise_id,
            name=self.name,
            category=self.category,
            sets=[s.numbers_only() for s in self.sets],
        )


class Workout(BaseModel):
    id: str = Field(default_factory=generate_id)
    date: datetime.date
    notes: str = ""
    exercises: list[WorkoutExercise] = Field(default_factory=list)


class Template(BaseModel):
    id: str = Field(default_factory=generate_id)
    name: str
    exercises: list[WorkoutExercise] = Field(default_factory=list)


class BodyWeightEntry(BaseModel):
    date: datetime.date
    weight: float = Field(gt=0)


class PersonalRecord(BaseModel):
    exercise_name: str
    metric: Metric
    value: float
    date: datetime.date

    @property
    def key(self) -> RecordKey:
        return (self.exercise_name, self.metric)


class PRNotice(BaseModel):
    """A new weight record worth showing to the user."""

    exercise_name: str
    value: float
    unit: str = "lbs"

    @computed_field
    @property
    def message(self) -> str:
        return f"{self.exercise_name}: {MathTools.format_number(self.value)} {self.unit}"


class Summary(BaseModel):
    start: datetime.datetime
    end: datetime.datetime
    workouts: int = 0
    total_volume: float = 0.0
    cardio_minutes: float = 0.0
    calories: float = 0.0


class ProgressPoint(BaseModel):
    date: datetime.date
    value: float


class ProgressStats(BaseModel):
    latest: float
    personal_best: float
    session_count: int
    improvement_pct: float


@dataclass
class AppState:
    """Everything the tracker keeps between operations."""

    exercises: list[Exercise] = field(default_factory=list)
    workouts: list[Workout] = field(default_factory=list)
    current_workout: Optional[Workout] = None
    templates: list[Template] = field(default_factory=list)
    body_weight_log: list[BodyWeightEntry] = field(default_factory=list)
    personal_records: dict[RecordKey, PersonalRecord] = field(default_factory=dict)

    def find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def find_workout(self, workout_id: str) -> Optional[Workout]:
        return next((w for w in self.workouts if w.id == workout_id), None)

    def find_template(self, template_id: str) -> Optional[Template]:
        return next((t for t in self.templates if t.id == template_id), None)
