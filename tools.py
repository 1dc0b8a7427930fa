import math
from typing import Iterable


class MathTools:
    """Provides the small numeric helpers used by the workout engine."""

    @staticmethod
    def parse_float(raw: object) -> float:
        """Return ``raw`` as a non-negative float.

        Entry happens mid-workout, so anything that is not a finite number
        (``None``, ``""``, ``"abc"``, ``nan``) becomes ``0.0`` and negative
        numbers are clamped to ``0.0``. Never raises.
        """
        if isinstance(raw, bool) or raw is None:
            return 0.0
        try:
            value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
        except (TypeError, ValueError, OverflowError):
            return 0.0
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value

    @classmethod
    def parse_int(cls, raw: object) -> int:
        """Return ``raw`` as a non-negative integer, truncating fractions."""
        return int(cls.parse_float(raw))

    @staticmethod
    def volume(sets: Iterable[tuple[int, float]]) -> float:
        """Compute training volume as the sum of reps times weight."""
        vol = 0.0
        for reps, weight in sets:
            vol += reps * weight
        return vol

    @staticmethod
    def percent_change(first: float, latest: float) -> float:
        """Return the change from ``first`` to ``latest`` in percent.

        Returns ``0.0`` when ``first`` is not positive.
        """
        if first <= 0:
            return 0.0
        return round((latest - first) / first * 100, 1)

    @staticmethod
    def format_number(value: float) -> str:
        """Format ``value`` without a trailing ``.0`` for whole numbers."""
        if float(value).is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")
