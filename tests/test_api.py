# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import date

from fastapi.testclient import TestClient

from trackpg.api import app
from trackpg.errors import ExternalAnalysisError
from trackpg.food.api import get_analyzer
from trackpg.food.models import AnalysisResult
from trackpg.kv import MemoryKeyValueStore
from trackpg.services import build_services, get_services

NUTRITION = {
    "nutrition": {
        "calories": "350 kcal",
        "carbs": "12g",
        "protein": "35g",
        "fat": "15g",
        "vitamins": ["Vitamin A"],
        "minerals": ["Iron"],
    },
    "health_coach_feedback": "Nice and balanced.",
}

IMAGE = {"image": ("meal.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")}


def fake_analyzer(*, image_bytes: bytes, image_mime: str) -> AnalysisResult:
    assert image_bytes.startswith(b"\xff\xd8")
    return AnalysisResult.model_validate(NUTRITION)


def failing_analyzer(*, image_bytes: bytes, image_mime: str) -> AnalysisResult:
    raise ExternalAnalysisError("Failed to parse AI response", details="no JSON object", raw_text="hmm")


class TestTrackApi(unittest.TestCase):
    def setUp(self) -> None:
        self.services = build_services(MemoryKeyValueStore(), today=lambda: date(2026, 10, 19))
        app.dependency_overrides[get_services] = lambda: self.services
        app.dependency_overrides[get_analyzer] = lambda: fake_analyzer
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()

    def test_liveness(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("running", resp.text)
        self.assertEqual(self.client.get("/api/health").json(), {"status": "ok"})

    def test_analyze_food(self) -> None:
        resp = self.client.post("/analyze-food", files=IMAGE)
        self.assertEqual(resp.status_code, 200)
        payload = resp.json()
        self.assertEqual(payload["nutrition"]["calories"], "350 kcal")
        self.assertEqual(payload["health_coach_feedback"], "Nice and balanced.")

    def test_analyze_food_without_image(self) -> None:
        resp = self.client.post("/analyze-food", files={"photo": ("meal.jpg", b"x", "image/jpeg")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "No image file provided"})

    def test_analyze_food_failure(self) -> None:
        app.dependency_overrides[get_analyzer] = lambda: failing_analyzer
        resp = self.client.post("/analyze-food", files=IMAGE)
        self.assertEqual(resp.status_code, 500)
        payload = resp.json()
        self.assertEqual(payload["error"], "Failed to analyze food image")
        self.assertEqual(payload["details"], "no JSON object")

    def test_analyze_and_log(self) -> None:
        resp = self.client.post("/api/food/analyze-and-log", files=IMAGE, data={"food_name": "Chicken salad"})
        self.assertEqual(resp.status_code, 200)
        day = resp.json()["day"]
        self.assertEqual(day["count"], 1)
        self.assertEqual(day["totals"]["calories"], 350.0)
        self.assertEqual(day["entries"][0]["food_name"], "Chicken salad")

    def test_analyze_and_log_failure_logs_nothing(self) -> None:
        app.dependency_overrides[get_analyzer] = lambda: failing_analyzer
        resp = self.client.post("/api/food/analyze-and-log", files=IMAGE)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(self.client.get("/api/food/today").json()["count"], 0)

    def test_water_flow(self) -> None:
        resp = self.client.post("/api/water/entries", json={"amount": 250})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["totals"]["intake"], 250)
        self.assertEqual(body["goal"], 2000)

        resp = self.client.delete(f"/api/water/entries/{body['entries'][0]['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totals"]["intake"], 0)

    def test_validation_and_not_found(self) -> None:
        resp = self.client.post("/api/water/entries", json={"amount": -5})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

        resp = self.client.delete("/api/water/entries/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Entry nope not found"})

    def test_exercise_and_learning(self) -> None:
        resp = self.client.post("/api/exercise/entries", json={"name": "Running", "duration": 30, "intensity": 5})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totals"]["score"], 540)
        self.assertEqual(resp.json()["total_score"], 540)
        self.assertEqual(len(self.client.get("/api/exercise/catalog").json()["exercises"]), 8)

        resp = self.client.post("/api/learning/entries", json={"topic": "Python", "duration": 45})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totals"]["total_minutes"], 45)

    def test_blank_exercise_name_is_a_bad_request(self) -> None:
        resp = self.client.post("/api/exercise/entries", json={"name": "   ", "duration": 10})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Please fill in all fields")
        self.assertEqual(self.client.get("/api/exercise/today").json()["count"], 0)

    def test_reset_keeps_running_score(self) -> None:
        self.client.post("/api/exercise/entries", json={"name": "Yoga", "duration": 10, "intensity": 5})
        resp = self.client.post("/api/exercise/reset")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["count"], 0)
        self.assertEqual(resp.json()["total_score"], 48)

    def test_food_goals(self) -> None:
        resp = self.client.put("/api/food/goals", json={"calories": 1800, "protein": 60, "carbs": 200, "fat": 60})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["goals"]["calories"], 1800)
        self.assertEqual(self.client.get("/api/food/goals").json()["protein"], 60)

    def test_puzzle_attempts(self) -> None:
        attempt = {
            "problem_id": "logic-1",
            "answer": "Echo",
            "expected_answer": "echo",
            "base_points": 20,
            "elapsed_seconds": 25,
        }
        resp = self.client.post("/api/puzzles/attempts", json=attempt)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["correct"])
        self.assertEqual(resp.json()["points_earned"], 25)

        resp = self.client.post("/api/puzzles/skip")
        self.assertEqual(resp.json()["streak"], 0)
        self.assertEqual(self.client.get("/api/puzzles/stats").json()["score"], 25)


if __name__ == "__main__":
    unittest.main()
