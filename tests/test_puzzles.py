# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

from trackpg.errors import ValidationError
from trackpg.kv import MemoryKeyValueStore
from trackpg.puzzles.scoring import answers_match, score_attempt
from trackpg.puzzles.storage import SCORE_KEY, SOLVED_KEY, STREAK_KEY, PuzzleProgress


class TestPuzzleScoring(unittest.TestCase):
    def test_fast_answer_with_streak(self) -> None:
        b = score_attempt(base_points=20, elapsed_seconds=25, streak=6, hint_used=False)
        self.assertEqual(b.time_bonus, 5)
        self.assertEqual(b.streak_bonus, 10)
        self.assertEqual(b.points, 35)

    def test_hint_penalty_is_floored(self) -> None:
        b = score_attempt(base_points=25, elapsed_seconds=30, streak=2, hint_used=True)
        self.assertEqual(b.hint_penalty, 7)
        self.assertEqual(b.points, 18)

    def test_slow_answer_penalty(self) -> None:
        b = score_attempt(base_points=30, elapsed_seconds=125, streak=3, hint_used=True)
        self.assertEqual(b.time_bonus, 0)
        self.assertEqual(b.time_penalty, 12)
        self.assertEqual(b.points, 14)

    def test_minimum_points(self) -> None:
        b = score_attempt(base_points=10, elapsed_seconds=95, streak=0, hint_used=True)
        self.assertEqual(b.points, 5)

    def test_answer_matching(self) -> None:
        self.assertTrue(answers_match("  Paris ", "paris"))
        self.assertTrue(answers_match("ECHO", "echo"))
        self.assertFalse(answers_match("Pari", "paris"))
        self.assertFalse(answers_match("", "paris"))


class TestPuzzleProgress(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryKeyValueStore()
        self.progress = PuzzleProgress(self.store)

    def attempt(self, answer: str, problem_id: str = "math-1", **kwargs) -> dict:
        data = {
            "problem_id": problem_id,
            "answer": answer,
            "expected_answer": "13",
            "base_points": 10,
            "elapsed_seconds": 40,
            "hint_used": False,
        }
        data.update(kwargs)
        return data

    def test_correct_answer_scores_and_extends_streak(self) -> None:
        result = self.progress.submit(self.attempt(" 13 "))
        self.assertTrue(result.correct)
        self.assertEqual(result.points_earned, 10)
        self.assertEqual(result.score, 10)
        self.assertEqual(result.streak, 1)
        self.assertEqual(result.solved_count, 1)
        self.assertEqual(self.store.get(SCORE_KEY), "10")
        self.assertEqual(json.loads(self.store.get(SOLVED_KEY)), ["math-1"])

    def test_wrong_answer_resets_streak(self) -> None:
        self.progress.submit(self.attempt("13"))
        self.progress.submit(self.attempt("13", problem_id="math-2"))
        result = self.progress.submit(self.attempt("12", problem_id="math-3"))
        self.assertFalse(result.correct)
        self.assertEqual(result.points_earned, 0)
        self.assertEqual(result.streak, 0)
        self.assertEqual(result.score, 20)
        self.assertEqual(self.store.get(STREAK_KEY), "0")

    def test_streak_bonus_applies_from_third_answer(self) -> None:
        for i in range(3):
            self.progress.submit(self.attempt("13", problem_id=f"p{i}"))
        result = self.progress.submit(self.attempt("13", problem_id="p3"))
        self.assertEqual(result.breakdown.streak_bonus, 5)
        self.assertEqual(result.points_earned, 15)

    def test_resolving_a_problem_does_not_duplicate(self) -> None:
        self.progress.submit(self.attempt("13"))
        result = self.progress.submit(self.attempt("13"))
        self.assertEqual(result.solved_count, 1)

    def test_skip_resets_streak_and_state_reloads(self) -> None:
        self.progress.submit(self.attempt("13"))
        stats = self.progress.skip()
        self.assertEqual(stats.streak, 0)

        reloaded = PuzzleProgress(self.store).stats()
        self.assertEqual((reloaded.score, reloaded.streak, reloaded.solved_count), (10, 0, 1))

    def test_invalid_attempt(self) -> None:
        with self.assertRaises(ValidationError):
            self.progress.submit(self.attempt("13", base_points=0))


if __name__ == "__main__":
    unittest.main()
