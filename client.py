import requests
from typing import Optional


class TrackerClient:
    """Simple REST client for the workout tracker API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 5) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def start_session(self, date: Optional[str] = None) -> str:
        params = {"date": date} if date else {}
        resp = requests.post(f"{self.base_url}/session", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()["id"]

    def add_exercise(self, exercise_id: str) -> int:
        resp = requests.post(
            f"{self.base_url}/session/exercises",
            params={"exercise_id": exercise_id},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()["index"]

    def log_sets(self, index: int, sets: list[dict]) -> dict:
        resp = requests.put(
            f"{self.base_url}/session/exercises/{index}/sets",
            json=sets,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def finish_session(self) -> list[str]:
        """Finish the session and return the PR messages it produced."""
        resp = requests.post(f"{self.base_url}/session/finish", timeout=self.timeout)
        resp.raise_for_status()
        return [r["message"] for r in resp.json()["records"]]

    def weekly_summary(self) -> dict:
        resp = requests.get(f"{self.base_url}/stats/weekly", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def progress(self, exercise: str, metric: str = "weight") -> dict:
        resp = requests.get(
            f"{self.base_url}/stats/progress",
            params={"exercise": exercise, "metric": metric},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
