# -*- coding: utf-8 -*-
"""Food — Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..dailylog import DailyLogView, LogEntry


def _coerce_str_list(value: object) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        v = value.strip()
        return [v] if v else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    s = str(value).strip()
    return [s] if s else []


class FoodEntry(LogEntry):
    food_name: str = Field(
        "Food item", min_length=1, validation_alias=AliasChoices("food_name", "foodName")
    )
    quantity: Optional[str] = Field(None, description="Human-readable portion, e.g. '1 serving'")
    calories: float = Field(..., ge=0)
    protein: float = Field(0.0, ge=0, description="grams")
    carbs: float = Field(0.0, ge=0, description="grams")
    fat: float = Field(0.0, ge=0, description="grams")
    vitamins: List[str] = Field(default_factory=list)
    minerals: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    health_coach_feedback: Optional[str] = None

    @field_validator("vitamins", "minerals", "ingredients", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> List[str]:
        return _coerce_str_list(value)


class NutritionGoals(BaseModel):
    calories: float = Field(2000, gt=0)
    protein: float = Field(50, gt=0)
    carbs: float = Field(250, gt=0)
    fat: float = Field(70, gt=0)


class NutrientProgress(BaseModel):
    value: float
    goal: float
    percentage: float = Field(..., ge=0, le=100, description="Share of goal, capped at 100")


class FoodDayView(DailyLogView):
    goals: NutritionGoals = NutritionGoals()
    progress: Dict[str, NutrientProgress] = Field(default_factory=dict)
    over_calorie_goal: bool = False


class AnalysisNutrition(BaseModel):
    """Nutrition block as returned by the vision model; amounts may be strings like '350 kcal'."""

    calories: Union[float, str]
    carbs: Union[float, str, None] = None
    protein: Union[float, str, None] = None
    fat: Union[float, str, None] = None
    vitamins: List[str] = Field(default_factory=list)
    minerals: List[str] = Field(default_factory=list)

    @field_validator("vitamins", "minerals", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> List[str]:
        return _coerce_str_list(value)


class AnalysisResult(BaseModel):
    nutrition: AnalysisNutrition
    health_coach_feedback: str = ""


class AnalyzeAndLogResponse(BaseModel):
    analysis: AnalysisResult
    day: FoodDayView
