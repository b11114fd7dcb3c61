from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the TrackPG backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("TRACKPG_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("TRACKPG_DB_PATH") or (self.data_root / "trackpg.db")
        ).expanduser()
        # "sqlite" persists across restarts; "memory" is for demos and tests.
        self.store_backend: str = (os.environ.get("TRACKPG_STORE") or "sqlite").strip().lower()
        self.log_level: str = (os.environ.get("TRACKPG_LOG_LEVEL") or "INFO").strip().upper()
        self.max_upload_mb: int = int(os.environ.get("TRACKPG_MAX_UPLOAD_MB") or "10")

        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY")
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-flash-latest")
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "30"))
        self.gemini_max_retries: int = int(os.environ.get("GEMINI_MAX_RETRIES", "1"))
        self.gemini_retry_backoff: float = float(os.environ.get("GEMINI_RETRY_BACKOFF", "1.0"))

        cors = os.environ.get("TRACKPG_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
