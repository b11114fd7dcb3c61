# -*- coding: utf-8 -*-
"""
TrackPG API

Daily tracking logs (learning, food, water, exercise), puzzle scoring and the
food photo analysis relay.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import settings
from .errors import ExternalAnalysisError, NotFoundError, TrackError, ValidationError
from .exercise.api import router as exercise_router
from .food.api import Analyzer, get_analyzer, read_image_or_400
from .food.api import router as food_router
from .food.models import AnalysisResult
from .learning.api import router as learning_router
from .logging_setup import configure_logging
from .puzzles.api import router as puzzles_router
from .water.api import router as water_router

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(
    title="TrackPG",
    description="Learning, food, water and exercise tracking with AI food photo analysis",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=exc.to_payload())


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content=exc.to_payload())


@app.exception_handler(ExternalAnalysisError)
async def _analysis_failed(request: Request, exc: ExternalAnalysisError):
    logger.warning("food analysis failed: %s (%s)", exc.message, exc.details)
    payload = {"error": "Failed to analyze food image", "details": exc.details or exc.message}
    if exc.raw_text:
        payload["raw_text"] = exc.raw_text
    return JSONResponse(status_code=500, content=payload)


@app.exception_handler(TrackError)
async def _track_error(request: Request, exc: TrackError):
    logger.error("unhandled tracking error: %s", exc.message)
    return JSONResponse(status_code=500, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def _request_validation(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


app.include_router(learning_router)
app.include_router(food_router)
app.include_router(water_router)
app.include_router(exercise_router)
app.include_router(puzzles_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}


@app.post("/analyze-food", response_model=AnalysisResult, summary="Estimate nutrition from a meal photo")
async def analyze_food_endpoint(
    image: Optional[UploadFile] = File(None),
    analyzer: Analyzer = Depends(get_analyzer),
):
    image_bytes, mime = await read_image_or_400(image)
    return await run_in_threadpool(analyzer, image_bytes=image_bytes, image_mime=mime)


@app.get("/", include_in_schema=False, response_class=PlainTextResponse)
def root():
    return "TrackPG backend is running!"


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("TRACKPG_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("TRACKPG_PORT") or os.environ.get("PORT") or "3000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 3000

    uvicorn.run("trackpg.api:app", host=host, port=port, reload=False)
