# -*- coding: utf-8 -*-
"""Nutrition estimator — hosted LLM via an OpenAI-compatible chat completions API."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

NUTRIENT_KEYS = ("calories", "protein", "carbs", "fat")

SYSTEM_INSTRUCTION = "You are an expert in nutritional analysis and always respond in the specified JSON format."

AMBIGUOUS_ENTRY_ERROR = "Could not accurately process food entry. Please be more specific or enter manually."
INVALID_FORMAT_ERROR = "Invalid data format from API."
CALL_FAILED_ERROR = "API call failed. Check the server log for details."


class NutritionEstimator(Protocol):
    async def estimate(self, food_name: str, quantity: str) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class EstimatorSettings:
    base_url: str
    api_key: str
    model: str
    timeout: Optional[float]
    temperature: float


def resolve_estimator_settings() -> Optional[EstimatorSettings]:
    if not settings.llm_api_key:
        return None
    return EstimatorSettings(
        base_url=settings.llm_base_url.rstrip("/"),
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        temperature=settings.llm_temperature,
    )


def build_prompt(food_name: str, quantity: str) -> str:
    return (
        "You are a nutritional analysis assistant. "
        f'For the food entry "{quantity} {food_name}", provide the estimated total calories, '
        "protein (in grams), carbohydrates (in grams), and fat (in grams). "
        "Respond ONLY with a valid JSON object formatted like this: "
        '{"calories": number, "protein": number, "carbs": number, "fat": number}. '
        "Ensure all values are numbers. "
        "If the food entry is ambiguous or you cannot provide accurate data, respond with "
        '{"calories": 0, "protein": 0, "carbs": 0, "fat": 0, '
        f'"error": "{AMBIGUOUS_ENTRY_ERROR}"}}.'
    )


def _extract_json(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```$", "", cleaned)

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("Model output does not contain a JSON object")
    return cleaned[start : end + 1]


def _extract_text(data: object) -> str:
    """Concatenate assistant message content from a chat completions response."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list):
        return ""
    out: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        msg = choice.get("message")
        if isinstance(msg, dict):
            content = msg.get("content")
            if isinstance(content, str) and content:
                out.append(content)
        maybe_text = choice.get("text")
        if isinstance(maybe_text, str) and maybe_text:
            out.append(maybe_text)
    return "".join(out)


def _is_number(value: object) -> bool:
    # json.loads accepts NaN and Infinity tokens.
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def normalize_estimate(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Map a parsed model reply onto the estimator response shape.

    Either all four nutrients are finite numbers, or the result is ``{"error": ...}``.
    """
    error = parsed.get("error")
    if error:
        return {"error": str(error)}
    if not all(_is_number(parsed.get(k)) for k in NUTRIENT_KEYS):
        return {"error": INVALID_FORMAT_ERROR}
    return {k: max(0, parsed[k]) for k in NUTRIENT_KEYS}


def parse_model_output(content: str) -> Dict[str, Any]:
    parsed = json.loads(_extract_json(content))
    if not isinstance(parsed, dict):
        raise ValueError("Model output is not a JSON object")
    return parsed


class LLMNutritionEstimator:
    """Estimates nutrition for one food entry per call. Never raises for call failures."""

    def __init__(self, cfg: EstimatorSettings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.cfg = cfg
        self._transport = transport

    @property
    def url(self) -> str:
        base_url = self.cfg.base_url
        if base_url.endswith("/chat/completions"):
            return base_url
        return f"{base_url}/chat/completions"

    def _payload(self, food_name: str, quantity: str) -> Dict[str, Any]:
        return {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": build_prompt(food_name, quantity)},
            ],
            "temperature": self.cfg.temperature,
            "response_format": {"type": "json_object"},
        }

    async def estimate(self, food_name: str, quantity: str) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.cfg.api_key}",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.cfg.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                resp = await client.post(self.url, headers=headers, json=self._payload(food_name, quantity))
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("nutrition estimate call failed for %r: %s", food_name, exc, exc_info=True)
            return {"error": CALL_FAILED_ERROR}

        content = _extract_text(data)
        try:
            parsed = parse_model_output(content)
        except ValueError as exc:
            logger.warning("nutrition estimate output parse failed for %r: %s", food_name, exc)
            return {"error": INVALID_FORMAT_ERROR}
        return normalize_estimate(parsed)


def resolve_estimator() -> Optional[LLMNutritionEstimator]:
    """Return the configured estimator, or None when no API key is set."""
    cfg = resolve_estimator_settings()
    if cfg is None:
        return None
    return LLMNutritionEstimator(cfg)
