# -*- coding: utf-8 -*-
"""Learning — running history of study sessions (not scoped to a day)."""

from __future__ import annotations

from typing import Any, Dict

from ..dailylog import DailyLog
from ..errors import ValidationError
from .models import LearningEntry, LearningHistoryView


class LearningLog(DailyLog[LearningEntry]):
    domain = "learning"
    entry_model = LearningEntry
    view_model = LearningHistoryView
    total_fields = {"total_minutes": "duration"}
    integer_totals = frozenset({"total_minutes"})
    newest_first = True
    scoped = False

    def check_entry(self, entry: LearningEntry) -> None:
        if not entry.topic.strip():
            raise ValidationError("Please fill in all fields", details="topic is blank")
        entry.topic = entry.topic.strip()

    def view_fields(self) -> Dict[str, Any]:
        if not self.entries:
            return {"average_understanding": 0.0}
        avg = sum(e.understanding for e in self.entries) / len(self.entries)
        return {"average_understanding": round(avg, 1)}
