from __future__ import annotations

import logging
from typing import Optional

from errors import InvalidInputError, NotFoundError
from models import AppState, Category, Exercise, generate_id
from tools import MathTools

logger = logging.getLogger(__name__)


class CatalogService:
    """Manage the exercise catalog."""

    DEFAULT_SETS = 3
    DEFAULT_REPS = 10

    def __init__(self, state: AppState) -> None:
        self.state = state

    def list_exercises(self, category: Optional[str] = None) -> list[Exercise]:
        if category in (None, "", "all"):
            return list(self.state.exercises)
        try:
            wanted = Category(category)
        except ValueError:
            raise InvalidInputError(f"unknown category {category}")
        return [e for e in self.state.exercises if e.category == wanted]

    def create_exercise(
        self,
        name: str,
        category: str,
        default_sets: object = None,
        default_reps: object = None,
    ) -> Exercise:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("exercise name required")
        try:
            cat = Category(category)
        except ValueError:
            raise InvalidInputError(f"unknown category {category}")
        sets = MathTools.parse_int(default_sets) or self.DEFAULT_SETS
        reps = MathTools.parse_int(default_reps) or self.DEFAULT_REPS
        exercise = Exercise(
            id=generate_id(),
            name=name,
            category=cat,
            default_sets=sets,
            default_reps=reps,
            is_custom=True,
        )
        self.state.exercises.append(exercise)
        logger.info("created exercise %s", name)
        return exercise

    def delete_exercise(self, exercise_id: str) -> None:
        exercise = self.state.find_exercise(exercise_id)
        if exercise is None:
            raise NotFoundError(f"exercise {exercise_id} not found")
        if not exercise.is_custom:
            raise InvalidInputError("default exercises cannot be deleted")
        self.state.exercises = [
            e for e in self.state.exercises if e.id != exercise_id
        ]
