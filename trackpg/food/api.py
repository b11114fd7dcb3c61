# -*- coding: utf-8 -*-
"""Food — API endpoints, including the photo analysis relay."""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..config import settings
from ..errors import ValidationError
from ..services import Services, get_services
from .models import AnalysisResult, AnalyzeAndLogResponse, FoodDayView, FoodEntry, NutritionGoals
from .vision import analyze_food

router = APIRouter(prefix="/api/food", tags=["Food"])

Analyzer = Callable[..., AnalysisResult]


def get_analyzer() -> Analyzer:
    return analyze_food


async def read_image_or_400(image: Optional[UploadFile]) -> tuple[bytes, str]:
    if image is None:
        raise ValidationError("No image file provided")
    data = await image.read()
    if not data:
        raise ValidationError("No image file provided")
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(f"Image too large: {len(data)} bytes > {settings.max_upload_bytes}")
    return data, image.content_type or "image/jpeg"


@router.get("/today", response_model=FoodDayView, summary="Today's food log and goal progress")
def today(services: Services = Depends(get_services)):
    return services.food.current()


@router.post("/entries", response_model=FoodDayView, summary="Log a food item")
def add_food(request: FoodEntry, services: Services = Depends(get_services)):
    return services.food.append(request)


@router.delete("/entries/{entry_id}", response_model=FoodDayView, summary="Delete a food item")
def delete_food(entry_id: str, services: Services = Depends(get_services)):
    return services.food.delete(entry_id)


@router.post("/reset", response_model=FoodDayView, summary="Clear today's food log")
def reset_today(services: Services = Depends(get_services)):
    return services.food.reset()


@router.get("/goals", response_model=NutritionGoals, summary="Daily nutrition goals")
def get_goals(services: Services = Depends(get_services)):
    return services.food.goals


@router.put("/goals", response_model=FoodDayView, summary="Set daily nutrition goals")
def set_goals(request: NutritionGoals, services: Services = Depends(get_services)):
    return services.food.set_goals(request)


@router.post("/analyze-and-log", response_model=AnalyzeAndLogResponse, summary="Analyze a meal photo and log it")
async def analyze_and_log(
    image: Optional[UploadFile] = File(None),
    food_name: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    services: Services = Depends(get_services),
    analyzer: Analyzer = Depends(get_analyzer),
):
    image_bytes, mime = await read_image_or_400(image)
    result = await run_in_threadpool(analyzer, image_bytes=image_bytes, image_mime=mime)
    day = await run_in_threadpool(services.food.log_analysis, result, food_name=food_name, quantity=quantity)
    return AnalyzeAndLogResponse(analysis=result, day=day)
