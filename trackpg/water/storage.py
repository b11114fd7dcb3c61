# -*- coding: utf-8 -*-
"""Water — today's servings, the daily goal and the goal streak."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..dailylog import DailyLog, DailyLogView, RunningCounter, round_half_up
from ..errors import PersistenceError, ValidationError
from .models import DEFAULT_GOAL_ML, WaterDayView, WaterEntry

logger = logging.getLogger(__name__)

GOAL_KEY = "waterGoal"
STREAK_KEY = "waterStreak"
STREAK_LOCK_KEY = "lastGoalAchieved_water"


class WaterLog(DailyLog[WaterEntry]):
    domain = "water"
    entry_model = WaterEntry
    view_model = WaterDayView
    total_fields = {"intake": "amount"}
    integer_totals = frozenset({"intake"})
    list_key = "log"

    def __init__(self, store, **kwargs) -> None:
        self.goal = RunningCounter(store, GOAL_KEY, default=DEFAULT_GOAL_ML)
        self.streak = RunningCounter(store, STREAK_KEY)
        self._last_credited = self._read_streak_lock(store)
        self._credited = False
        super().__init__(store, **kwargs)

    @staticmethod
    def _read_streak_lock(store) -> str | None:
        try:
            return store.get(STREAK_LOCK_KEY)
        except PersistenceError:
            logger.exception("failed to read %s", STREAK_LOCK_KEY)
            return None

    def extra_blob_fields(self) -> Dict[str, Any]:
        # Written for readers of the raw blob; never read back.
        return {"currentIntake": self.totals.get("intake", 0)}

    def set_goal(self, goal: int) -> DailyLogView:
        if goal <= 0:
            raise ValidationError("Goal must be greater than 0")
        self.persisted = self.goal.set(int(goal))
        return self.view()

    def append(self, data: Any) -> DailyLogView:
        self._credited = False
        return super().append(data)

    def after_append(self, entry: WaterEntry) -> bool:
        if self.totals["intake"] >= self.goal.value:
            return self._credit_streak()
        return True

    def _credit_streak(self) -> bool:
        """Increment the streak at most once per calendar day."""
        if self._last_credited == self.date:
            return True
        self._last_credited = self.date
        self._credited = True
        ok = self.streak.add(1)
        try:
            self.store.set(STREAK_LOCK_KEY, self.date or "")
        except PersistenceError:
            logger.exception("failed to persist %s", STREAK_LOCK_KEY)
            ok = False
        logger.info("water goal reached on %s, streak now %s", self.date, self.streak.value)
        return ok

    def view_fields(self) -> Dict[str, Any]:
        intake = self.totals.get("intake", 0)
        goal = int(self.goal.value) or DEFAULT_GOAL_ML
        credited, self._credited = self._credited, False
        return {
            "goal": goal,
            "streak": int(self.streak.value),
            "percentage": round_half_up(intake / goal * 100),
            "goal_reached": intake >= goal,
            "streak_credited": credited,
        }
