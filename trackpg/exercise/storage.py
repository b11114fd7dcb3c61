# -*- coding: utf-8 -*-
"""Exercise domain — today's sessions and the all-time score."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..dailylog import DailyLog, DailyLogView, RunningCounter, round_half_up, validate_model
from ..errors import ValidationError
from .calculator import calculate_for, lookup_exercise
from .models import ExerciseDayView, ExerciseEntry, ExerciseRequest

logger = logging.getLogger(__name__)

TOTAL_SCORE_KEY = "exerciseTotalScore"


class ExerciseLog(DailyLog[ExerciseEntry]):
    domain = "exercise"
    entry_model = ExerciseEntry
    view_model = ExerciseDayView
    total_fields = {"calories": "calories_burnt", "score": "score"}
    integer_totals = frozenset({"calories", "score"})
    newest_first = True
    list_key = "history"

    def __init__(self, store, **kwargs) -> None:
        self.total_score = RunningCounter(store, TOTAL_SCORE_KEY)
        super().__init__(store, **kwargs)

    def log(self, data: Any) -> DailyLogView:
        """Score a session from name/duration/intensity and append it."""
        request: ExerciseRequest = validate_model(ExerciseRequest, data)  # type: ignore[assignment]
        if not request.name.strip():
            raise ValidationError("Please fill in all fields", details="name is blank")
        exercise = lookup_exercise(request.name)
        outcome = calculate_for(exercise, request.duration, request.intensity)
        entry = ExerciseEntry(
            name=exercise.name,
            duration=request.duration,
            intensity=request.intensity,
            calories_burnt=round_half_up(outcome.calories_burnt),
            score=outcome.score,
        )
        return self.append(entry)

    def extra_blob_fields(self) -> Dict[str, Any]:
        # Kept for readers of the raw blob; load recomputes it.
        return {"todayCalories": self.totals.get("calories", 0)}

    def after_append(self, entry: ExerciseEntry) -> bool:
        return self.total_score.add(entry.score)

    def after_delete(self, entry: ExerciseEntry) -> bool:
        return self.total_score.add(-entry.score)

    def view_fields(self) -> Dict[str, Any]:
        return {"total_score": int(self.total_score.value)}
