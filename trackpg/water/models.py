# -*- coding: utf-8 -*-
"""Water — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..dailylog import DailyLogView, LogEntry

DEFAULT_GOAL_ML = 2000


class WaterEntry(LogEntry):
    amount: int = Field(..., gt=0, description="Millilitres")


class WaterDayView(DailyLogView):
    goal: int = DEFAULT_GOAL_ML
    streak: int = 0
    percentage: int = 0
    goal_reached: bool = False
    streak_credited: bool = Field(False, description="True when this mutation credited today's streak")


class WaterGoalRequest(BaseModel):
    goal: int = Field(..., gt=0, description="Daily goal in millilitres")
