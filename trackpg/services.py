# -*- coding: utf-8 -*-
"""Process-lifetime aggregator objects, one per domain.

Each aggregator loads today's log when constructed and keeps its state in
memory for the life of the process; a fresh process loads again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .exercise.storage import ExerciseLog
from .food.storage import FoodLog
from .kv import KeyLocks, KeyValueStore, create_store
from .learning.storage import LearningLog
from .puzzles.storage import PuzzleProgress
from .water.storage import WaterLog


@dataclass
class Services:
    store: KeyValueStore
    learning: LearningLog
    food: FoodLog
    water: WaterLog
    exercise: ExerciseLog
    puzzles: PuzzleProgress


def build_services(
    store: KeyValueStore | None = None,
    *,
    today: Callable[[], date] | None = None,
) -> Services:
    store = store or create_store()
    locks = KeyLocks()
    return Services(
        store=store,
        learning=LearningLog(store, locks=locks, today=today),
        food=FoodLog(store, locks=locks, today=today),
        water=WaterLog(store, locks=locks, today=today),
        exercise=ExerciseLog(store, locks=locks, today=today),
        puzzles=PuzzleProgress(store, locks=locks),
    )


_services: Optional[Services] = None


def get_services() -> Services:
    """FastAPI dependency; tests override it through ``app.dependency_overrides``."""
    global _services
    if _services is None:
        _services = build_services()
    return _services
