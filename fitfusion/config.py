from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the FitFusion API server."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("FITFUSION_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("FITFUSION_DB_PATH") or (self.data_root / "fitfusion.db")
        ).expanduser()

        # In production you MUST set FITFUSION_JWT_SECRET. The dev secret keeps local
        # demos easy but is not safe for public deployments.
        self.jwt_secret: str = os.environ.get("FITFUSION_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("FITFUSION_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("FITFUSION_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        # Server-to-server key for AI food suggestion ingestion; unset disables the endpoint.
        self.ingestion_key: str | None = os.environ.get("FITFUSION_INGESTION_KEY") or None
        self.seed_sample_data: bool = (os.environ.get("FITFUSION_SEED_SAMPLE_DATA") or "1").strip() in {"1", "true", "True"}

        self.ai_api_key: str | None = os.environ.get("FITFUSION_AI_API_KEY") or None
        self.ai_base_url: str = os.environ.get(
            "FITFUSION_AI_BASE_URL", "https://api.openai.com/v1"
        )
        self.ai_model: str = os.environ.get("FITFUSION_AI_MODEL", "gpt-4o-mini")
        self.ai_timeout: float = float(os.environ.get("FITFUSION_AI_TIMEOUT", "30"))
        self.ai_max_tokens: int = int(os.environ.get("FITFUSION_AI_MAX_TOKENS", "4096"))
        self.ai_temperature: float = float(os.environ.get("FITFUSION_AI_TEMPERATURE", "0.2"))

        self.log_level: str = (os.environ.get("FITFUSION_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("FITFUSION_CORS_ORIGINS", "http://localhost:3000")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
