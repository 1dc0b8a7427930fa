import argparse
import csv
import datetime
import json
import logging
import shutil

from config import APP_VERSION
from db import Database, WorkoutRepository
from tracker import WorkoutTracker


def export_workouts(db_path: str, fmt: str, output_path: str) -> int:
    """Write the workout history to ``output_path`` and return the workout count."""
    workouts = WorkoutRepository(db_path).load()
    if fmt == "json":
        data = [w.model_dump(mode="json") for w in workouts]
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return len(workouts)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["workout_id", "date", "exercise", "category", "set", "reps", "weight", "duration", "calories"]
        )
        for w in workouts:
            for ex in w.exercises:
                for number, s in enumerate(ex.sets, start=1):
                    writer.writerow(
                        [
                            w.id,
                            w.date.isoformat(),
                            ex.name,
                            ex.category.value,
                            number,
                            s.reps,
                            s.weight,
                            s.duration,
                            s.calories,
                        ]
                    )
    return len(workouts)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str, yaml_path: str) -> None:
    """Populate the database with a demo workout if history is empty."""
    tracker = WorkoutTracker(db_path, yaml_path)
    if tracker.list_workouts():
        print("Database already contains workouts")
        return
    if tracker.current_workout is not None:
        tracker.discard_session()
    tracker.start_session(datetime.date.today())
    tracker.add_exercise("bench-press")
    tracker.log_sets(0, [{"reps": 5, "weight": 100}, {"reps": 5, "weight": 105}])
    tracker.add_exercise("running")
    tracker.log_sets(1, [{"duration": 20, "calories": 220}])
    _workout, notices = tracker.finish_session()
    for notice in notices:
        print(f"New PR - {notice.message}")
    print("Demo data inserted")


def report(db_path: str, yaml_path: str) -> dict:
    tracker = WorkoutTracker(db_path, yaml_path)
    weekly = tracker.weekly_summary()
    monthly = tracker.monthly_summary()
    data = {
        "weekly": weekly.model_dump(mode="json", exclude={"start", "end"}),
        "monthly": monthly.model_dump(mode="json", exclude={"start", "end"}),
        "current_streak": tracker.current_streak(),
        "longest_streak": tracker.longest_streak(),
    }
    print(json.dumps(data, indent=2))
    return data


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=APP_VERSION)
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="workout.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="csv")
    exp.add_argument("--out", default="workouts.csv")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="workout.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="workout.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="workout.db")
    demo.add_argument("--yaml", default="settings.yaml")

    rep = sub.add_parser("report")
    rep.add_argument("--db", default="workout.db")
    rep.add_argument("--yaml", default="settings.yaml")

    vac = sub.add_parser("vacuum")
    vac.add_argument("--db", default="workout.db")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "export":
        count = export_workouts(args.db, args.fmt, args.out)
        print(f"Exported {count} workouts to {args.out}")
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "report":
        report(args.db, args.yaml)
    elif args.cmd == "vacuum":
        Database(args.db).vacuum()


if __name__ == "__main__":
    main()
