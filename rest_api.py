import datetime
from typing import List, Dict

from fastapi import FastAPI, HTTPException, Body, APIRouter

from config import APP_VERSION
from errors import NotFoundError, TrackerError
from tracker import WorkoutTracker


def _http_error(e: TrackerError) -> HTTPException:
    status = 404 if isinstance(e, NotFoundError) else 400
    return HTTPException(status_code=status, detail=str(e))


class TrackerAPI:
    """Provides REST endpoints for workout logging."""

    def __init__(
        self,
        db_path: str = "workout.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.tracker = WorkoutTracker(db_path, yaml_path)
        self.app = FastAPI(
            title="Workout Tracker API",
            description="REST API for workout logging and analytics",
            version=APP_VERSION,
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        session_router = APIRouter(prefix="/session", tags=["Session"])
        stats_router = APIRouter(prefix="/stats", tags=["Statistics"])
        tracker = self.tracker

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                tracker.workout_repo.exists()
                return {"status": "ok", "version": APP_VERSION}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/settings")
        def get_settings():
            return tracker.settings.all_settings()

        @self.app.get("/exercises")
        def list_exercises(category: str = None):
            try:
                return tracker.list_exercises(category)
            except TrackerError as e:
                raise _http_error(e)

        @self.app.post("/exercises")
        def create_exercise(
            name: str,
            category: str,
            default_sets: str = None,
            default_reps: str = None,
        ):
            try:
                ex = tracker.create_exercise(name, category, default_sets, default_reps)
                return {"id": ex.id}
            except TrackerError as e:
                raise _http_error(e)

        @self.app.delete("/exercises/{exercise_id}")
        def delete_exercise(exercise_id: str):
            try:
                tracker.delete_exercise(exercise_id)
                return {"status": "deleted"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.get("")
        def get_session():
            if tracker.current_workout is None:
                raise HTTPException(status_code=404, detail="no workout in progress")
            return tracker.current_workout

        @session_router.post("")
        def start_session(date: datetime.date = None):
            try:
                workout = tracker.start_session(date)
                return {"id": workout.id, "date": workout.date}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.delete("")
        def discard_session():
            try:
                tracker.discard_session()
                return {"status": "discarded"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.put("/notes")
        def set_session_notes(notes: str = Body(...)):
            try:
                tracker.set_notes(notes)
                return {"status": "updated"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.post("/exercises")
        def add_session_exercise(exercise_id: str):
            try:
                entry = tracker.add_exercise(exercise_id)
                return {"index": len(tracker.current_workout.exercises) - 1, "exercise": entry}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.delete("/exercises/{index}")
        def remove_session_exercise(index: int):
            try:
                tracker.remove_exercise(index)
                return {"status": "deleted"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.put("/exercises/{index}/notes")
        def set_exercise_notes(index: int, notes: str = Body(...)):
            try:
                tracker.set_exercise_notes(index, notes)
                return {"status": "updated"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.put("/exercises/{index}/sets")
        def log_sets(index: int, sets: List[Dict] = Body(...)):
            try:
                return tracker.log_sets(index, sets)
            except TrackerError as e:
                raise _http_error(e)

        @session_router.post("/exercises/{index}/sets")
        def add_set(index: int):
            try:
                return tracker.add_set(index)
            except TrackerError as e:
                raise _http_error(e)

        @session_router.delete("/exercises/{index}/sets/{set_index}")
        def remove_set(index: int, set_index: int):
            try:
                tracker.remove_set(index, set_index)
                return {"status": "deleted"}
            except TrackerError as e:
                raise _http_error(e)

        @session_router.post("/finish")
        def finish_session():
            try:
                workout, notices = tracker.finish_session()
                return {"id": workout.id, "records": notices}
            except TrackerError as e:
                raise _http_error(e)

        @self.app.get("/workouts")
        def list_workouts(limit: int = None):
            return [
                {"id": w.id, "date": w.date, "exercises": [e.name for e in w.exercises]}
                for w in tracker.list_workouts(limit)
            ]

        @self.app.get("/workouts/{workout_id}")
        def get_workout(workout_id: str):
            try:
                return tracker.get_workout(workout_id)
            except TrackerError as e:
                raise _http_error(e)

        @self.app.post("/workouts/{workout_id}/repeat")
        def repeat_workout(workout_id: str, date: datetime.date = None):
            try:
                workout = tracker.repeat_workout(workout_id, date)
                return {"id": workout.id}
            except TrackerError as e:
                raise _http_error(e)

        @self.app.get("/templates")
        def list_templates():
            return [{"id": t.id, "name": t.name} for t in tracker.list_templates()]

        @self.app.post("/templates")
        def save_template(name: str):
            try:
                template = tracker.save_template(name)
                return {"id": template.id}
            except TrackerError as e:
                raise _http_error(e)

        @self.app.get("/templates/{template_id}")
        def get_template(template_id: str):
            try:
                return tracker.get_template(template_id)
            except TrackerError as e:
                raise _http_error(e)

        @self.app.post("/templates/{template_id}/load")
        def load_template(template_id: str, date: datetime.date = None):
            try:
                workout = tracker.load_template(template_id, date)
                return {"id": workout.id}
            except TrackerError as e:
                raise _http_error(e)

        @self.app.delete("/templates/{template_id}")
        def delete_template(template_id: str):
            tracker.delete_template(template_id)
            return {"status": "deleted"}

        @self.app.get("/records")
        def list_records():
            return tracker.list_records()

        @self.app.get("/records/{name}")
        def exercise_records(name: str):
            return tracker.records_for(name)

        @self.app.get("/records/{name}/{metric}")
        def get_record(name: str, metric: str):
            try:
                record = tracker.get_record(name, metric)
            except TrackerError as e:
                raise _http_error(e)
            if record is None:
                raise HTTPException(status_code=404, detail="no record")
            return record

        @stats_router.get("/weekly")
        def weekly_summary(now: datetime.datetime = None):
            return tracker.weekly_summary(now)

        @stats_router.get("/monthly")
        def monthly_summary(now: datetime.datetime = None):
            return tracker.monthly_summary(now)

        @stats_router.get("/streak")
        def streak(today: datetime.date = None):
            return {
                "current": tracker.current_streak(today),
                "record": tracker.longest_streak(),
            }

        @stats_router.get("/exercises")
        def exercises_with_data():
            return tracker.exercises_with_data()

        @stats_router.get("/progress")
        def progress(exercise: str, metric: str = "weight"):
            try:
                points, stats = tracker.progress(exercise, metric)
            except TrackerError as e:
                raise _http_error(e)
            return {"points": points, "stats": stats}

        @self.app.get("/body_weight")
        def weight_history(limit: int = None):
            return tracker.get_weight_history(limit)

        @self.app.post("/body_weight")
        def log_body_weight(weight: str, date: datetime.date = None):
            try:
                entry = tracker.log_body_weight(weight, date)
                return entry
            except TrackerError as e:
                raise _http_error(e)

        @self.app.delete("/body_weight/{date}")
        def delete_body_weight(date: datetime.date):
            try:
                tracker.delete_body_weight(date)
                return {"status": "deleted"}
            except TrackerError as e:
                raise _http_error(e)

        self.app.include_router(session_router)
        self.app.include_router(stats_router)


api = TrackerAPI()
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app)
