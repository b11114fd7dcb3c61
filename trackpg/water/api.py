# -*- coding: utf-8 -*-
"""Water — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..services import Services, get_services
from .models import WaterDayView, WaterEntry, WaterGoalRequest

router = APIRouter(prefix="/api/water", tags=["Water"])


@router.get("/today", response_model=WaterDayView, summary="Today's intake, goal and streak")
def today(services: Services = Depends(get_services)):
    return services.water.current()


@router.post("/entries", response_model=WaterDayView, summary="Log a serving")
def add_serving(request: WaterEntry, services: Services = Depends(get_services)):
    return services.water.append(request)


@router.delete("/entries/{entry_id}", response_model=WaterDayView, summary="Delete a serving")
def delete_serving(entry_id: str, services: Services = Depends(get_services)):
    return services.water.delete(entry_id)


@router.post("/reset", response_model=WaterDayView, summary="Clear today's servings")
def reset_today(services: Services = Depends(get_services)):
    return services.water.reset()


@router.put("/goal", response_model=WaterDayView, summary="Set the daily goal")
def set_goal(request: WaterGoalRequest, services: Services = Depends(get_services)):
    return services.water.set_goal(request.goal)
