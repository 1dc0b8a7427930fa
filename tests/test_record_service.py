import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import Category, Metric, Workout, WorkoutExercise, WorkoutSet
from record_service import RecordService


def workout(day: int, *exercises: WorkoutExercise) -> Workout:
    return Workout(date=datetime.date(2024, 1, day), exercises=list(exercises))


def strength(name: str, *sets: tuple[int, float]) -> WorkoutExercise:
    return WorkoutExercise(
        exercise_id=name.lower(),
        name=name,
        category=Category.WEIGHT,
        sets=[WorkoutSet(reps=r, weight=w) for r, w in sets],
    )


def cardio(name: str, duration: float, calories: float) -> WorkoutExercise:
    return WorkoutExercise(
        exercise_id=name.lower(),
        name=name,
        category=Category.CARDIO,
        sets=[WorkoutSet(duration=duration, calories=calories)],
    )


class RecordServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.service = RecordService()

    def test_first_workout_sets_both_metrics(self) -> None:
        records, notices = self.service.update_records(
            {}, workout(1, strength("Bench Press", (10, 100), (5, 135)))
        )
        weight = records[("Bench Press", Metric.WEIGHT)]
        volume = records[("Bench Press", Metric.VOLUME)]
        self.assertEqual(weight.value, 135)
        self.assertEqual(weight.date, datetime.date(2024, 1, 1))
        self.assertEqual(volume.value, 10 * 100 + 5 * 135)
        self.assertEqual(len(notices), 1)
        self.assertEqual(notices[0].message, "Bench Press: 135 lbs")

    def test_tie_keeps_existing_record(self) -> None:
        records, _ = self.service.update_records(
            {}, workout(1, strength("Squat", (5, 200)))
        )
        records, notices = self.service.update_records(
            records, workout(2, strength("Squat", (5, 200)))
        )
        self.assertEqual(notices, [])
        self.assertEqual(
            records[("Squat", Metric.WEIGHT)].date, datetime.date(2024, 1, 1)
        )
        self.assertEqual(
            records[("Squat", Metric.VOLUME)].date, datetime.date(2024, 1, 1)
        )

    def test_volume_record_without_weight_notice(self) -> None:
        records, _ = self.service.update_records(
            {}, workout(1, strength("Squat", (5, 200)))
        )
        records, notices = self.service.update_records(
            records, workout(2, strength("Squat", (10, 150)))
        )
        self.assertEqual(notices, [])
        self.assertEqual(records[("Squat", Metric.WEIGHT)].value, 200)
        self.assertEqual(records[("Squat", Metric.VOLUME)].value, 1500)
        self.assertEqual(
            records[("Squat", Metric.VOLUME)].date, datetime.date(2024, 1, 2)
        )

    def test_cardio_never_recorded(self) -> None:
        records, notices = self.service.update_records(
            {}, workout(1, cardio("Running", 30, 300))
        )
        self.assertEqual(records, {})
        self.assertEqual(notices, [])

    def test_zero_values_are_not_records(self) -> None:
        bodyweight = WorkoutExercise(
            exercise_id="push-ups",
            name="Push-ups",
            category=Category.BODYWEIGHT,
            sets=[WorkoutSet(reps=15)],
        )
        records, notices = self.service.update_records({}, workout(1, bodyweight))
        self.assertEqual(records, {})
        self.assertEqual(notices, [])

    def test_input_is_not_modified(self) -> None:
        original, _ = self.service.update_records(
            {}, workout(1, strength("Deadlift", (3, 300)))
        )
        snapshot = dict(original)
        updated, _ = self.service.update_records(
            original, workout(2, strength("Deadlift", (1, 350)))
        )
        self.assertEqual(original, snapshot)
        self.assertEqual(updated[("Deadlift", Metric.WEIGHT)].value, 350)

    def test_weight_record_is_monotonic(self) -> None:
        records = {}
        seen = []
        for day, weight in enumerate([100, 90, 120, 120, 110], start=1):
            records, _ = self.service.update_records(
                records, workout(day, strength("Row", (5, weight)))
            )
            seen.append(records[("Row", Metric.WEIGHT)].value)
        self.assertEqual(seen, [100, 100, 120, 120, 120])
        self.assertEqual(seen, sorted(seen))

    def test_names_with_separators_stay_independent(self) -> None:
        records, _ = self.service.update_records(
            {},
            workout(
                1,
                strength("Row", (5, 100)),
                strength("Row_weight", (5, 50)),
            ),
        )
        self.assertEqual(records[("Row", Metric.WEIGHT)].value, 100)
        self.assertEqual(records[("Row_weight", Metric.WEIGHT)].value, 50)
        self.assertEqual(len(RecordService.records_for(records, "Row")), 2)

    def test_unit_label(self) -> None:
        service = RecordService(unit="kg")
        _, notices = service.update_records(
            {}, workout(1, strength("Bench Press", (5, 102.5)))
        )
        self.assertEqual(notices[0].message, "Bench Press: 102.5 kg")


if __name__ == "__main__":
    unittest.main()
