"""
Central configuration for the RetroGen pixel sprite generator.
All core constants and environment-driven settings live here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment / .env file."""

    # ── Gemini image model ──────────────────────────────────────────
    GEMINI_API_KEY: str = ""
    IMAGE_MODEL: str = "gemini-2.5-flash-image"
    ASPECT_RATIO: str = "1:1"

    # ── Canvas / export ─────────────────────────────────────────────
    CANVAS_SIZE: int = 256  # strict output, independent of the prompt resolution
    EXPORT_FILENAME: str = "pixel-sprite-256.png"

    # ── Form defaults ───────────────────────────────────────────────
    DEFAULT_RESOLUTION: str = "256x256"
    DEFAULT_MAX_COLORS: int = 5
    DEFAULT_BAND_COUNT: int = 3

    # ── Paths ───────────────────────────────────────────────────────
    PROJECT_ROOT: Path = Path(__file__).parent
    OUTPUTS_DIR: Optional[Path] = None

    @model_validator(mode="after")
    def _set_default_paths(self) -> Settings:
        if self.OUTPUTS_DIR is None:
            self.OUTPUTS_DIR = self.PROJECT_ROOT / "outputs"
        self.OUTPUTS_DIR.mkdir(exist_ok=True)
        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton instance
settings = Settings()
