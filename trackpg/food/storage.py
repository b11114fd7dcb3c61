# -*- coding: utf-8 -*-
"""Food — today's food log, nutrition goals and goal progress."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..dailylog import DailyLog, DailyLogView, load_json, save_json, validate_model
from ..errors import ExternalAnalysisError, ValidationError
from .models import AnalysisResult, FoodDayView, FoodEntry, NutrientProgress, NutritionGoals
from .vision import coerce_amount

logger = logging.getLogger(__name__)

GOALS_KEY = "nutritionGoals"
NUTRIENTS = ("calories", "protein", "carbs", "fat")


def entry_from_analysis(
    result: AnalysisResult,
    *,
    food_name: Optional[str] = None,
    quantity: Optional[str] = None,
) -> FoodEntry:
    """Turn a vision estimate into a loggable entry.

    Calories must be readable as a number; missing macros count as 0 g.
    """
    n = result.nutrition
    calories = coerce_amount(n.calories)
    if calories is None:
        raise ExternalAnalysisError(
            "AI response has no usable calorie estimate", details=f"calories={n.calories!r}"
        )
    return FoodEntry(
        food_name=(food_name or "").strip() or "Analyzed meal",
        quantity=quantity,
        calories=round(calories, 1),
        protein=round(coerce_amount(n.protein) or 0.0, 1),
        carbs=round(coerce_amount(n.carbs) or 0.0, 1),
        fat=round(coerce_amount(n.fat) or 0.0, 1),
        vitamins=n.vitamins,
        minerals=n.minerals,
        health_coach_feedback=result.health_coach_feedback or None,
    )


class FoodLog(DailyLog[FoodEntry]):
    domain = "food"
    entry_model = FoodEntry
    view_model = FoodDayView
    total_fields = {n: n for n in NUTRIENTS}

    def __init__(self, store, **kwargs) -> None:
        self.goals = self._load_goals(store)
        super().__init__(store, **kwargs)

    def check_entry(self, entry: FoodEntry) -> None:
        if not entry.food_name.strip():
            raise ValidationError("Please fill in all fields", details="food_name is blank")
        entry.food_name = entry.food_name.strip()

    @staticmethod
    def _load_goals(store) -> NutritionGoals:
        raw = load_json(store, GOALS_KEY, None)
        if not isinstance(raw, dict):
            return NutritionGoals()
        try:
            return NutritionGoals.model_validate(raw)
        except PydanticValidationError:
            logger.warning("ignoring invalid %s blob", GOALS_KEY)
            return NutritionGoals()

    def set_goals(self, data: Any) -> DailyLogView:
        goals: NutritionGoals = validate_model(NutritionGoals, data)  # type: ignore[assignment]
        self.goals = goals
        self.persisted = save_json(self.store, GOALS_KEY, goals.model_dump())
        return self.view()

    def log_analysis(
        self,
        result: AnalysisResult,
        *,
        food_name: Optional[str] = None,
        quantity: Optional[str] = None,
    ) -> DailyLogView:
        return self.append(entry_from_analysis(result, food_name=food_name, quantity=quantity))

    def progress(self) -> Dict[str, NutrientProgress]:
        out: Dict[str, NutrientProgress] = {}
        for name in NUTRIENTS:
            value = float(self.totals.get(name, 0.0))
            goal = float(getattr(self.goals, name))
            out[name] = NutrientProgress(
                value=value,
                goal=goal,
                percentage=round(min(value / goal * 100, 100.0), 1),
            )
        return out

    def view_fields(self) -> Dict[str, Any]:
        return {
            "goals": self.goals,
            "progress": self.progress(),
            "over_calorie_goal": self.totals.get("calories", 0.0) > self.goals.calories,
        }
