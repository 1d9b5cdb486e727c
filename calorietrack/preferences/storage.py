# -*- coding: utf-8 -*-
"""Preferences storage — daily goal and theme, independent of the active date."""

from __future__ import annotations

import logging
from typing import Union

from ..config import settings
from ..errors import ValidationError
from ..store import KeyValueStore
from .models import AppSettings, Theme

logger = logging.getLogger(__name__)

GOAL_KEY = "settings.dailyGoal"
THEME_KEY = "settings.theme"


def parse_goal(value: Union[int, str, None]) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    try:
        goal = int(str(value).strip())
    except ValueError:
        return None
    return goal if goal > 0 else None


def load_settings(store: KeyValueStore) -> AppSettings:
    default_goal = parse_goal(settings.default_daily_goal) or 2000
    goal = parse_goal(store.get(GOAL_KEY))
    if goal is None:
        goal = default_goal

    raw_theme = store.get(THEME_KEY)
    try:
        theme = Theme(raw_theme) if raw_theme else Theme.light
    except ValueError:
        logger.warning("ignoring unknown stored theme %r", raw_theme)
        theme = Theme.light
    return AppSettings(daily_goal=goal, theme=theme)


def set_daily_goal(store: KeyValueStore, value: Union[int, str]) -> AppSettings:
    goal = parse_goal(value)
    if goal is None:
        raise ValidationError("Goal must be a positive number.")
    store.set(GOAL_KEY, str(goal))
    return load_settings(store)


def set_theme(store: KeyValueStore, value: str) -> AppSettings:
    try:
        theme = Theme(value)
    except ValueError as exc:
        raise ValidationError(f"Theme must be 'light' or 'dark', got {value!r}.") from exc
    store.set(THEME_KEY, theme.value)
    return load_settings(store)


def toggle_theme(store: KeyValueStore) -> AppSettings:
    current = load_settings(store).theme
    return set_theme(store, Theme.dark.value if current == Theme.light else Theme.light.value)
