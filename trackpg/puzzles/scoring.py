# -*- coding: utf-8 -*-
"""Brain-puzzle point calculation and answer matching."""

from __future__ import annotations

import math

from .models import ScoreBreakdown

MIN_POINTS = 5
TIME_BONUS_WINDOW = 30
PENALTY_FREE_SECONDS = 60


def score_attempt(base_points: int, elapsed_seconds: int, streak: int, hint_used: bool) -> ScoreBreakdown:
    time_bonus = max(0, TIME_BONUS_WINDOW - elapsed_seconds)
    streak_bonus = (streak // 3) * 5
    hint_penalty = math.floor(base_points * 0.3) if hint_used else 0
    time_penalty = ((elapsed_seconds - PENALTY_FREE_SECONDS) // 10) * 2 if elapsed_seconds > PENALTY_FREE_SECONDS else 0
    points = max(MIN_POINTS, base_points + time_bonus + streak_bonus - hint_penalty - time_penalty)
    return ScoreBreakdown(
        base_points=base_points,
        time_bonus=time_bonus,
        streak_bonus=streak_bonus,
        hint_penalty=hint_penalty,
        time_penalty=time_penalty,
        points=points,
    )


def answers_match(given: str, expected: str) -> bool:
    return given.strip().lower() == expected.strip().lower()
