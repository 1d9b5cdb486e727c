from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


class Settings:
    """Centralized configuration for the calorie tracker service."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("CALORIE_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("CALORIE_DB_PATH") or (self.data_root / "calorietrack.db")
        ).expanduser()
        self.default_daily_goal: int = int(os.environ.get("CALORIE_DEFAULT_GOAL") or "2000")

        # Nutrition estimator (OpenAI-compatible chat completions endpoint).
        # Without an API key the estimator is unavailable and calories must be entered manually.
        self.llm_api_key: str | None = os.environ.get("CALORIE_LLM_API_KEY") or None
        self.llm_base_url: str = os.environ.get(
            "CALORIE_LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai"
        )
        self.llm_model: str = os.environ.get("CALORIE_LLM_MODEL", "gemini-2.5-flash")
        timeout_raw = (os.environ.get("CALORIE_LLM_TIMEOUT") or "").strip()
        self.llm_timeout: Optional[float] = float(timeout_raw) if timeout_raw else None
        self.llm_temperature: float = float(os.environ.get("CALORIE_LLM_TEMPERATURE", "0.2"))

        self.log_level: str = (os.environ.get("CALORIE_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("CALORIE_HOST") or "127.0.0.1"
        self.port_raw: str = os.environ.get("CALORIE_PORT") or "8000"

        cors = os.environ.get("CALORIE_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
