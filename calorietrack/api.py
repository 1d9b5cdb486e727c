# -*- coding: utf-8 -*-
"""
CalorieTrack API

Meal logging per calendar day, daily progress against a calorie goal, and
optional LLM-based nutrition estimation.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .meals.api import router as meals_router
from .meals.ledger import today_key
from .preferences.api import router as preferences_router

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="CalorieTrack",
    description="Daily meal logging with calorie goal tracking",
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

app.include_router(meals_router)
app.include_router(preferences_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.get("/api/today")
def today() -> dict:
    """Date key of the current local calendar day."""
    return {"date": today_key()}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    try:
        port = int(settings.port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("calorietrack.api:app", host=settings.host, port=port, reload=False)
