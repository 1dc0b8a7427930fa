from __future__ import annotations

import datetime

from errors import InvalidInputError, NotFoundError
from models import AppState, BodyWeightEntry
from tools import MathTools


class BodyWeightService:
    """Body weight log with one entry per day, oldest first."""

    def __init__(self, state: AppState) -> None:
        self.state = state

    def log(self, date: datetime.date, weight: object) -> BodyWeightEntry:
        value = MathTools.parse_float(weight)
        if value <= 0:
            raise InvalidInputError("weight must be positive")
        entry = BodyWeightEntry(date=date, weight=value)
        entries = [e for e in self.state.body_weight_log if e.date != date]
        entries.append(entry)
        entries.sort(key=lambda e: e.date)
        self.state.body_weight_log = entries
        return entry

    def delete(self, date: datetime.date) -> None:
        if not any(e.date == date for e in self.state.body_weight_log):
            raise NotFoundError(f"no body weight logged for {date}")
        self.state.body_weight_log = [
            e for e in self.state.body_weight_log if e.date != date
        ]

    def history(self, limit: int = 30) -> list[BodyWeightEntry]:
        if limit <= 0:
            return []
        return self.state.body_weight_log[-limit:]
