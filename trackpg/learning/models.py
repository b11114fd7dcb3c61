# -*- coding: utf-8 -*-
"""Learning — Pydantic models."""

from __future__ import annotations

from pydantic import Field

from ..dailylog import DailyLogView, LogEntry


class LearningEntry(LogEntry):
    topic: str = Field(..., min_length=1, description="What was learned")
    duration: int = Field(..., gt=0, description="Minutes")
    understanding: int = Field(50, ge=0, le=100, description="Self-rated understanding, percent")


class LearningHistoryView(DailyLogView):
    average_understanding: float = 0.0
