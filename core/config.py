# core/config.py
"""
Process-wide settings, read from ``RELATED_*`` environment variables or a
``.env`` file at the repo root.  Per-page settings (URL, heading, limits)
live in ``configs/targets.yaml`` instead – see
``services.pipeline.config_loader``.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    # ------------------------------------------------------------------
    # Secondary fetch (og:image lookups)
    # ------------------------------------------------------------------
    DEFAULT_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122 Safari/537.36"
    )
    DEFAULT_ACCEPT: str = (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    )
    FETCH_TIMEOUT_SECONDS: float = 20.0
    ENRICH_CONCURRENCY: int = 3

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    NAVIGATION_TIMEOUT_SECONDS: float = 120.0
    SETTLE_DELAY_SECONDS: float = 4.5
    PRESENCE_TIMEOUT_SECONDS: float = 60.0
    SCROLL_BY_PIXELS: int = 900
    POST_SCROLL_DELAY_SECONDS: float = 1.0

    # ------------------------------------------------------------------
    # Files & logging
    # ------------------------------------------------------------------
    TARGETS_FILE: Path = REPO_ROOT / "configs" / "targets.yaml"
    OUTPUT_DIR: Path = Path("docs")
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="RELATED_",
        env_file=REPO_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
