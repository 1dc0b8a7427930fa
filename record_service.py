from __future__ import annotations

import logging

from models import (
    Metric,
    PersonalRecord,
    PRNotice,
    RECORD_METRICS,
    RecordKey,
    Workout,
)

logger = logging.getLogger(__name__)


class RecordService:
    """Maintain best-ever weight and volume per exercise."""

    def __init__(self, unit: str = "lbs") -> None:
        self.unit = unit

    def update_records(
        self,
        records: dict[RecordKey, PersonalRecord],
        workout: Workout,
    ) -> tuple[dict[RecordKey, PersonalRecord], list[PRNotice]]:
        """Return updated records and the weight PRs set by ``workout``.

        ``records`` is not modified. A record is replaced only when the new
        value is strictly greater; ties keep the older record.
        """
        updated = dict(records)
        notices: list[PRNotice] = []
        for exercise in workout.exercises:
            if exercise.is_cardio:
                continue
            for metric in RECORD_METRICS:
                value = exercise.metric_value(metric)
                if value <= 0:
                    continue
                key = (exercise.name, metric)
                existing = updated.get(key)
                if existing is not None and value <= existing.value:
                    continue
                updated[key] = PersonalRecord(
                    exercise_name=exercise.name,
                    metric=metric,
                    value=value,
                    date=workout.date,
                )
                if metric == Metric.WEIGHT:
                    notice = PRNotice(
                        exercise_name=exercise.name, value=value, unit=self.unit
                    )
                    logger.info("new personal record %s", notice.message)
                    notices.append(notice)
        return updated, notices

    @staticmethod
    def records_for(
        records: dict[RecordKey, PersonalRecord], exercise_name: str
    ) -> list[PersonalRecord]:
        return [
            records[(exercise_name, m)]
            for m in RECORD_METRICS
            if (exercise_name, m) in records
        ]
