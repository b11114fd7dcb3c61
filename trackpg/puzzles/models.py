# -*- coding: utf-8 -*-
"""Puzzles — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ScoreBreakdown(BaseModel):
    base_points: int
    time_bonus: int
    streak_bonus: int
    hint_penalty: int
    time_penalty: int
    points: int


class AttemptRequest(BaseModel):
    problem_id: str = Field(..., min_length=1)
    answer: str = Field(..., description="What the user typed")
    expected_answer: str = Field(..., min_length=1)
    base_points: int = Field(..., gt=0)
    elapsed_seconds: int = Field(0, ge=0)
    hint_used: bool = False


class AttemptResult(BaseModel):
    correct: bool
    points_earned: int = 0
    breakdown: Optional[ScoreBreakdown] = None
    score: int
    streak: int
    solved_count: int
    persisted: bool = True


class PuzzleStats(BaseModel):
    score: int
    streak: int
    solved_count: int
    persisted: bool = True
