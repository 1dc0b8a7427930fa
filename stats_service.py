from __future__ import annotations

import datetime
from typing import Iterable, Iterator, List, Optional

from models import Metric, ProgressPoint, ProgressStats, Summary, Workout
from tools import MathTools


def _as_datetime(value: datetime.date | datetime.datetime) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        # workout dates carry no zone; compare on the caller's wall clock
        return value.replace(tzinfo=None)
    return datetime.datetime.combine(value, datetime.time.min)


def _as_date(value: datetime.date | datetime.datetime) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


class ProgressSeries:
    """Progress of one exercise over the workout history.

    Iterating recomputes the points from ``workouts`` every time, so the
    series always reflects the history it was built on and can be iterated
    any number of times.
    """

    def __init__(
        self, workouts: List[Workout], exercise_name: str, metric: Metric
    ) -> None:
        self.workouts = workouts
        self.exercise_name = exercise_name
        self.metric = Metric(metric)

    def __iter__(self) -> Iterator[ProgressPoint]:
        for workout in reversed(self.workouts):
            exercise = next(
                (e for e in workout.exercises if e.name == self.exercise_name),
                None,
            )
            if exercise is None or not exercise.sets:
                continue
            value = exercise.metric_value(self.metric)
            if value > 0:
                yield ProgressPoint(date=workout.date, value=value)


class StatisticsService:
    """Compute workout statistics for analysis."""

    def __init__(self, weekly_days: int = 7, monthly_days: int = 30) -> None:
        self.weekly_days = weekly_days
        self.monthly_days = monthly_days

    def summary(
        self,
        workouts: Iterable[Workout],
        now: datetime.date | datetime.datetime,
        days: int,
    ) -> Summary:
        """Totals of all workouts dated on or after ``now - days``.

        A workout date counts as midnight of that day.
        """
        end = _as_datetime(now)
        start = end - datetime.timedelta(days=days)
        result = Summary(start=start, end=end)
        for workout in workouts:
            if _as_datetime(workout.date) < start:
                continue
            result.workouts += 1
            for exercise in workout.exercises:
                if exercise.is_cardio:
                    result.cardio_minutes += exercise.total_duration()
                else:
                    result.total_volume += exercise.total_volume()
                result.calories += exercise.total_calories()
        return result

    def weekly_summary(
        self, workouts: Iterable[Workout], now: datetime.date | datetime.datetime
    ) -> Summary:
        return self.summary(workouts, now, self.weekly_days)

    def monthly_summary(
        self, workouts: Iterable[Workout], now: datetime.date | datetime.datetime
    ) -> Summary:
        return self.summary(workouts, now, self.monthly_days)

    @staticmethod
    def current_streak(
        workouts: Iterable[Workout], today: datetime.date | datetime.datetime
    ) -> int:
        """Return the number of days in the streak ending today or yesterday."""
        cursor = _as_date(today)
        dates = sorted({w.date for w in workouts if w.date <= cursor}, reverse=True)
        streak = 0
        for date in dates:
            if (cursor - date).days > 1:
                break
            streak += 1
            cursor = date
        return streak

    @staticmethod
    def longest_streak(workouts: Iterable[Workout]) -> int:
        """Return the longest run of consecutive workout days."""
        dates = sorted({w.date for w in workouts})
        if not dates:
            return 0
        record = current = 1
        for prev, date in zip(dates, dates[1:]):
            if (date - prev).days == 1:
                current += 1
            else:
                current = 1
            record = max(record, current)
        return record

    @staticmethod
    def progress_series(
        workouts: List[Workout], exercise_name: str, metric: Metric
    ) -> ProgressSeries:
        return ProgressSeries(workouts, exercise_name, metric)

    @staticmethod
    def progress_stats(series: Iterable[ProgressPoint]) -> Optional[ProgressStats]:
        """Summarize ``series``; ``None`` when it has no points."""
        values = [p.value for p in series]
        if not values:
            return None
        return ProgressStats(
            latest=values[-1],
            personal_best=max(values),
            session_count=len(values),
            improvement_pct=MathTools.percent_change(values[0], values[-1]),
        )

    @staticmethod
    def exercises_with_data(workouts: Iterable[Workout]) -> list[str]:
        names = {e.name for w in workouts for e in w.exercises}
        return sorted(names)
