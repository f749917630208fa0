"""Runtime settings read from ``PCM_EFFECTS_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_STAGING_PATH = "temp.raw"
DEFAULT_OUTPUT_PATH = "output.wav"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(slots=True)
class EffectSettings:
    staging_path: Path = Path(DEFAULT_STAGING_PATH)
    default_output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    keep_staging: bool = False
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> EffectSettings:
        staging = os.getenv("PCM_EFFECTS_STAGING_PATH", "").strip() or DEFAULT_STAGING_PATH
        output = os.getenv("PCM_EFFECTS_DEFAULT_OUTPUT", "").strip() or DEFAULT_OUTPUT_PATH
        keep_raw = os.getenv("PCM_EFFECTS_KEEP_STAGING", "").strip().lower()
        level = os.getenv("PCM_EFFECTS_LOG_LEVEL", "INFO").strip().upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
        return EffectSettings(
            staging_path=Path(staging),
            default_output_path=Path(output),
            keep_staging=keep_raw in {"1", "true", "yes", "on"},
            log_level=level,
        )
