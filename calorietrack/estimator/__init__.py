# -*- coding: utf-8 -*-
"""Nutrition estimation.

The meal workflow only depends on the ``NutritionEstimator`` shape: given a
food name and a quantity, return ``{calories, protein, carbs, fat}`` or
``{error}``. The hosted-LLM client lives in ``client.py``.
"""

from .client import LLMNutritionEstimator, NutritionEstimator, resolve_estimator

__all__ = ["LLMNutritionEstimator", "NutritionEstimator", "resolve_estimator"]
