# -*- coding: utf-8 -*-
"""Exercise domain — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from ..dailylog import DailyLogView, LogEntry


class ExerciseType(BaseModel):
    name: str
    calories_per_min: float = Field(..., gt=0)
    score_multiplier: float = Field(..., gt=0)


class ExerciseRequest(BaseModel):
    name: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0, description="Minutes")
    intensity: int = Field(5, ge=1, le=10)


class ExerciseEntry(LogEntry):
    name: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0)
    intensity: int = Field(5, ge=1, le=10)
    calories_burnt: int = Field(
        ..., ge=0, validation_alias=AliasChoices("calories_burnt", "caloriesBurnt")
    )
    score: int = Field(..., ge=0)


class ExerciseDayView(DailyLogView):
    total_score: int = Field(0, description="All-time score across days")


class ExerciseCatalogResponse(BaseModel):
    exercises: List[ExerciseType]
    default: ExerciseType
    note: Optional[str] = None
