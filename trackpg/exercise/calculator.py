# -*- coding: utf-8 -*-
"""Exercise calorie and score calculation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..dailylog import round_half_up
from .models import ExerciseType

COMMON_EXERCISES: List[ExerciseType] = [
    ExerciseType(name="Running", calories_per_min=10, score_multiplier=1.2),
    ExerciseType(name="Cycling", calories_per_min=8, score_multiplier=1.1),
    ExerciseType(name="Swimming", calories_per_min=12, score_multiplier=1.5),
    ExerciseType(name="Weight Training", calories_per_min=7, score_multiplier=1.3),
    ExerciseType(name="Yoga", calories_per_min=4, score_multiplier=0.8),
    ExerciseType(name="Walking", calories_per_min=5, score_multiplier=0.9),
    ExerciseType(name="HIIT", calories_per_min=14, score_multiplier=1.8),
    ExerciseType(name="Dancing", calories_per_min=7, score_multiplier=1.0),
]

DEFAULT_RATE = 6.0
DEFAULT_MULTIPLIER = 1.0

_BY_NAME: Dict[str, ExerciseType] = {e.name.lower(): e for e in COMMON_EXERCISES}


@dataclass(frozen=True)
class ExerciseOutcome:
    calories_burnt: float
    score: int


def lookup_exercise(name: str) -> ExerciseType:
    """Case-insensitive catalogue lookup; unknown names get the default rate."""
    cleaned = name.strip()
    found = _BY_NAME.get(cleaned.lower())
    if found is not None:
        return found
    return ExerciseType(name=cleaned, calories_per_min=DEFAULT_RATE, score_multiplier=DEFAULT_MULTIPLIER)


def calculate(rate_per_minute: float, duration: float, intensity: float, multiplier: float) -> ExerciseOutcome:
    base = rate_per_minute * duration
    calories = base + base * (intensity / 10)
    return ExerciseOutcome(calories_burnt=calories, score=round_half_up(calories * multiplier))


def calculate_for(exercise: ExerciseType, duration: int, intensity: int) -> ExerciseOutcome:
    return calculate(exercise.calories_per_min, duration, intensity, exercise.score_multiplier)
