from __future__ import annotations

import datetime
import logging

from errors import EmptySessionError, InvalidInputError
from models import Template, Workout

logger = logging.getLogger(__name__)


class TemplateService:
    """Save workout structures as templates and replay them."""

    @staticmethod
    def save_template(session: Workout, name: str) -> Template:
        if not session.exercises:
            raise EmptySessionError("cannot save a template without exercises")
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("template name required")
        template = Template(
            name=name,
            exercises=[e.snapshot() for e in session.exercises],
        )
        logger.info("saved template %s (%s)", template.name, template.id)
        return template

    @staticmethod
    def load_template(template: Template, date: datetime.date) -> Workout:
        """Return a new workout with the template's exercises and sets."""
        return Workout(
            date=date,
            exercises=[e.snapshot() for e in template.exercises],
        )

    @staticmethod
    def repeat_workout(workout: Workout, date: datetime.date) -> Workout:
        """Return a new workout repeating a finished one on ``date``."""
        return Workout(
            date=date,
            exercises=[e.snapshot() for e in workout.exercises],
        )

    @staticmethod
    def delete_template(templates: list[Template], template_id: str) -> list[Template]:
        return [t for t in templates if t.id != template_id]
