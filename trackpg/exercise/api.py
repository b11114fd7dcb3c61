# -*- coding: utf-8 -*-
"""Exercise domain — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..services import Services, get_services
from .calculator import COMMON_EXERCISES, DEFAULT_MULTIPLIER, DEFAULT_RATE
from .models import ExerciseCatalogResponse, ExerciseDayView, ExerciseRequest, ExerciseType

router = APIRouter(prefix="/api/exercise", tags=["Exercise"])


@router.get("/catalog", response_model=ExerciseCatalogResponse, summary="Known exercises and their rates")
def catalog():
    return ExerciseCatalogResponse(
        exercises=COMMON_EXERCISES,
        default=ExerciseType(name="Other", calories_per_min=DEFAULT_RATE, score_multiplier=DEFAULT_MULTIPLIER),
        note="Names are matched case-insensitively; anything else uses the default rate.",
    )


@router.get("/today", response_model=ExerciseDayView, summary="Today's sessions and totals")
def today(services: Services = Depends(get_services)):
    return services.exercise.current()


@router.post("/entries", response_model=ExerciseDayView, summary="Log and score a session")
def add_session(request: ExerciseRequest, services: Services = Depends(get_services)):
    return services.exercise.log(request)


@router.delete("/entries/{entry_id}", response_model=ExerciseDayView, summary="Delete a session")
def delete_session(entry_id: str, services: Services = Depends(get_services)):
    return services.exercise.delete(entry_id)


@router.post("/reset", response_model=ExerciseDayView, summary="Clear today's sessions")
def reset_today(services: Services = Depends(get_services)):
    return services.exercise.reset()
