# -*- coding: utf-8 -*-
"""Test doubles shared across test modules."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple


class FakeEstimator:
    """Replays canned estimator responses and records every call."""

    def __init__(self, responses: List[Dict[str, Any]]) -> None:
        self.responses = list(responses)
        self.calls: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def estimate(self, food_name: str, quantity: str) -> Dict[str, Any]:
        self.calls.append((food_name, quantity))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            return self.responses.pop(0)
        finally:
            self.in_flight -= 1


class AbandoningEstimator:
    """Simulates the entry form being closed while the first estimate is in flight."""

    def __init__(self) -> None:
        self.submission: Optional[Any] = None
        self.calls = 0

    async def estimate(self, food_name: str, quantity: str) -> Dict[str, Any]:
        self.calls += 1
        assert self.submission is not None
        self.submission.cancel()
        await asyncio.sleep(0)
        return {"calories": 100, "protein": 1, "carbs": 1, "fat": 1}
