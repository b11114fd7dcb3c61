# -*- coding: utf-8 -*-
"""Puzzles — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..services import Services, get_services
from .models import AttemptRequest, AttemptResult, PuzzleStats

router = APIRouter(prefix="/api/puzzles", tags=["Puzzles"])


@router.get("/stats", response_model=PuzzleStats, summary="Score, streak and solved count")
def stats(services: Services = Depends(get_services)):
    return services.puzzles.stats()


@router.post("/attempts", response_model=AttemptResult, summary="Check an answer and score it")
def submit_attempt(request: AttemptRequest, services: Services = Depends(get_services)):
    return services.puzzles.submit(request)


@router.post("/skip", response_model=PuzzleStats, summary="Skip the current problem (resets the streak)")
def skip(services: Services = Depends(get_services)):
    return services.puzzles.skip()
