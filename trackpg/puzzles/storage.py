# -*- coding: utf-8 -*-
"""Puzzles — running score, streak and the set of solved problems."""

from __future__ import annotations

import logging
from typing import Any, List

from ..dailylog import RunningCounter, load_json, save_json, validate_model
from ..kv import KeyLocks, KeyValueStore
from .models import AttemptRequest, AttemptResult, PuzzleStats
from .scoring import answers_match, score_attempt

logger = logging.getLogger(__name__)

SCORE_KEY = "puzzleTotalScore"
STREAK_KEY = "puzzleStreak"
SOLVED_KEY = "puzzleSolved"


class PuzzleProgress:
    def __init__(self, store: KeyValueStore, *, locks: KeyLocks | None = None) -> None:
        self.store = store
        self.locks = locks or KeyLocks()
        self.score = RunningCounter(store, SCORE_KEY)
        self.streak = RunningCounter(store, STREAK_KEY)
        solved = load_json(store, SOLVED_KEY, [])
        self.solved: List[str] = [str(s) for s in solved] if isinstance(solved, list) else []
        self.persisted = True

    def submit(self, data: Any) -> AttemptResult:
        request: AttemptRequest = validate_model(AttemptRequest, data)  # type: ignore[assignment]
        with self.locks.for_key(SCORE_KEY):
            if not answers_match(request.answer, request.expected_answer):
                self.persisted = self.streak.set(0)
                logger.debug("wrong answer for %s, streak reset", request.problem_id)
                return self._result(correct=False)

            breakdown = score_attempt(
                request.base_points,
                request.elapsed_seconds,
                int(self.streak.value),
                request.hint_used,
            )
            ok = self.score.add(breakdown.points)
            ok = self.streak.add(1) and ok
            if request.problem_id not in self.solved:
                self.solved.append(request.problem_id)
                ok = save_json(self.store, SOLVED_KEY, self.solved) and ok
            self.persisted = ok
            return self._result(correct=True, points=breakdown.points, breakdown=breakdown)

    def skip(self) -> PuzzleStats:
        with self.locks.for_key(SCORE_KEY):
            self.persisted = self.streak.set(0)
            return self.stats()

    def stats(self) -> PuzzleStats:
        return PuzzleStats(
            score=int(self.score.value),
            streak=int(self.streak.value),
            solved_count=len(self.solved),
            persisted=self.persisted,
        )

    def _result(self, *, correct: bool, points: int = 0, breakdown=None) -> AttemptResult:
        return AttemptResult(
            correct=correct,
            points_earned=points,
            breakdown=breakdown,
            score=int(self.score.value),
            streak=int(self.streak.value),
            solved_count=len(self.solved),
            persisted=self.persisted,
        )
