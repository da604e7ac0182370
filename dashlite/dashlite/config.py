"""Runtime settings read from the environment + logging setup."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_INSIGHT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    insight_model: str = DEFAULT_INSIGHT_MODEL
    insight_temperature: float = DEFAULT_TEMPERATURE
    log_level: str = "INFO"

    @property
    def insights_enabled(self) -> bool:
        return bool(self.openai_api_key)


def _as_float(raw: Optional[str], default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        insight_model=env.get("DASHLITE_INSIGHT_MODEL") or DEFAULT_INSIGHT_MODEL,
        insight_temperature=_as_float(
            env.get("DASHLITE_INSIGHT_TEMPERATURE"), DEFAULT_TEMPERATURE
        ),
        log_level=(env.get("DASHLITE_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Attach a stream handler to the package logger (idempotent)."""
    settings = settings or load_settings()
    logger = logging.getLogger("dashlite")
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["Settings", "load_settings", "configure_logging"]
