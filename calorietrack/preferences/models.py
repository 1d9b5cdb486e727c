# -*- coding: utf-8 -*-
"""Preferences — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Theme(str, Enum):
    light = "light"
    dark = "dark"


class AppSettings(BaseModel):
    """Process-wide settings; loaded at startup, persisted on every change."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    daily_goal: int = Field(2000, gt=0, alias="dailyGoal")
    theme: Theme = Theme.light


class SettingsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    daily_goal: int = Field(..., alias="dailyGoal")
    theme: Theme
    estimator_available: bool = Field(..., alias="estimatorAvailable")
    notice: Optional[str] = Field(None, description="Shown when calorie auto-calculation is disabled")


class GoalUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    daily_goal: Union[int, str] = Field(..., alias="dailyGoal")


class ThemeUpdateRequest(BaseModel):
    theme: str
