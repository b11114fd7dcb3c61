# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from datetime import date

from trackpg.errors import ValidationError
from trackpg.exercise.calculator import calculate, lookup_exercise
from trackpg.exercise.storage import TOTAL_SCORE_KEY, ExerciseLog
from trackpg.kv import MemoryKeyValueStore


class TestExerciseCalculator(unittest.TestCase):
    def test_known_formula(self) -> None:
        outcome = calculate(10, 30, 5, 1.2)
        self.assertAlmostEqual(outcome.calories_burnt, 450.0)
        self.assertEqual(outcome.score, 540)

    def test_score_rounds_half_up(self) -> None:
        # 1 cal/min for 1 minute at intensity 0 with a 2.5x multiplier -> 2.5 points
        self.assertEqual(calculate(1, 1, 0, 2.5).score, 3)

    def test_lookup_is_case_insensitive(self) -> None:
        self.assertEqual(lookup_exercise("running").name, "Running")
        self.assertEqual(lookup_exercise("  hiit ").calories_per_min, 14)
        self.assertEqual(lookup_exercise("WEIGHT TRAINING").score_multiplier, 1.3)

    def test_unknown_exercise_uses_default_rate(self) -> None:
        rowing = lookup_exercise("Rowing")
        self.assertEqual(rowing.name, "Rowing")
        self.assertEqual(rowing.calories_per_min, 6)
        self.assertEqual(rowing.score_multiplier, 1.0)


class TestExerciseLog(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryKeyValueStore()
        self.log = ExerciseLog(self.store, today=lambda: date(2026, 10, 19))

    def test_log_scores_and_totals(self) -> None:
        self.log.log({"name": "running", "duration": 30, "intensity": 5})
        view = self.log.log({"name": "Swimming", "duration": 20, "intensity": 7})

        self.assertEqual([e["name"] for e in view.entries], ["Swimming", "Running"])
        swim = view.entries[0]
        self.assertEqual(swim["calories_burnt"], 408)
        self.assertEqual(swim["score"], 612)
        self.assertEqual(view.totals, {"calories": 858, "score": 1152})
        self.assertEqual(view.total_score, 1152)

        blob = json.loads(self.store.get("exerciseLog_2026-10-19"))
        self.assertEqual(blob["todayCalories"], 858)
        self.assertEqual(len(blob["history"]), 2)

    def test_total_score_tracks_deletes(self) -> None:
        view = self.log.log({"name": "Running", "duration": 30, "intensity": 5})
        run_id = view.entries[0]["id"]
        self.log.log({"name": "Rowing", "duration": 10, "intensity": 3})

        view = self.log.delete(run_id)
        self.assertEqual(view.total_score, view.totals["score"])
        self.assertEqual(self.store.get(TOTAL_SCORE_KEY), str(view.total_score))

    def test_total_score_spans_days(self) -> None:
        self.store.set(TOTAL_SCORE_KEY, "1000")
        log = ExerciseLog(self.store, today=lambda: date(2026, 10, 20))
        view = log.log({"name": "Running", "duration": 30, "intensity": 5})
        self.assertEqual(view.totals["score"], 540)
        self.assertEqual(view.total_score, 1540)

    def test_rejects_non_positive_duration(self) -> None:
        with self.assertRaises(ValidationError):
            self.log.log({"name": "Running", "duration": 0})
        with self.assertRaises(ValidationError):
            self.log.log({"name": "", "duration": 10})
        with self.assertRaises(ValidationError):
            self.log.log({"name": "   ", "duration": 10})
        self.assertEqual(self.log.current().count, 0)
        self.assertIsNone(self.store.get(TOTAL_SCORE_KEY))


if __name__ == "__main__":
    unittest.main()
