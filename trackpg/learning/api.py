# -*- coding: utf-8 -*-
"""Learning — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..services import Services, get_services
from .models import LearningEntry, LearningHistoryView

router = APIRouter(prefix="/api/learning", tags=["Learning"])


@router.get("/history", response_model=LearningHistoryView, summary="Learning history, newest first")
def history(services: Services = Depends(get_services)):
    return services.learning.current()


@router.post("/entries", response_model=LearningHistoryView, summary="Log a learning session")
def add_entry(request: LearningEntry, services: Services = Depends(get_services)):
    return services.learning.append(request)


@router.delete("/entries/{entry_id}", response_model=LearningHistoryView, summary="Delete a learning session")
def delete_entry(entry_id: str, services: Services = Depends(get_services)):
    return services.learning.delete(entry_id)
