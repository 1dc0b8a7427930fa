import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from errors import EmptySessionError, InvalidInputError
from models import Category, Template, Workout, WorkoutExercise, WorkoutSet
from template_service import TemplateService


def session() -> Workout:
    return Workout(
        date=datetime.date(2024, 4, 2),
        notes="leg day",
        exercises=[
            WorkoutExercise(
                exercise_id="squat",
                name="Squat",
                category=Category.WEIGHT,
                notes="belt",
                sets=[WorkoutSet(reps=5, weight=225), WorkoutSet(reps=5, weight=235)],
            ),
            WorkoutExercise(
                exercise_id="rowing",
                name="Rowing Machine",
                category=Category.CARDIO,
                sets=[WorkoutSet(duration=10, calories=90)],
            ),
        ],
    )


class TemplateServiceTest(unittest.TestCase):
    def test_save_template_copies_structure(self) -> None:
        source = session()
        template = TemplateService.save_template(source, "  Legs A ")
        self.assertEqual(template.name, "Legs A")
        self.assertEqual([e.name for e in template.exercises], ["Squat", "Rowing Machine"])
        self.assertEqual(template.exercises[0].notes, "")
        self.assertEqual(template.exercises[0].sets[1].weight, 235)

        source.exercises[0].sets[0].weight = 999
        self.assertEqual(template.exercises[0].sets[0].weight, 225)

    def test_save_template_validation(self) -> None:
        with self.assertRaises(EmptySessionError):
            TemplateService.save_template(Workout(date=datetime.date.today()), "Empty")
        with self.assertRaises(InvalidInputError):
            TemplateService.save_template(session(), "   ")

    def test_load_template_creates_fresh_workout(self) -> None:
        template = TemplateService.save_template(session(), "Legs A")
        day = datetime.date(2024, 4, 9)
        first = TemplateService.load_template(template, day)
        second = TemplateService.load_template(template, day)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(first.date, day)
        self.assertEqual(first.notes, "")
        first.exercises[0].sets.append(WorkoutSet(reps=1, weight=300))
        self.assertEqual(len(template.exercises[0].sets), 2)
        self.assertEqual(len(second.exercises[0].sets), 2)

    def test_repeat_workout(self) -> None:
        source = session()
        day = datetime.date(2024, 4, 16)
        repeated = TemplateService.repeat_workout(source, day)
        self.assertNotEqual(repeated.id, source.id)
        self.assertEqual(repeated.date, day)
        self.assertEqual(
            [(s.reps, s.weight) for s in repeated.exercises[0].sets],
            [(5, 225), (5, 235)],
        )
        self.assertEqual(repeated.exercises[1].sets[0].duration, 10)

    def test_delete_template(self) -> None:
        keep = Template(name="Keep")
        drop = Template(name="Drop")
        remaining = TemplateService.delete_template([keep, drop], drop.id)
        self.assertEqual(remaining, [keep])
        self.assertEqual(TemplateService.delete_template(remaining, "missing"), [keep])


if __name__ == "__main__":
    unittest.main()
