"""Runtime settings for the generation pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .templates import MAX_TEMPLATE_BYTES

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "TEXT2DECK_"


@dataclass(frozen=True)
class PipelineSettings:
    """Thresholds and throttling applied by the orchestrator.

    ``stage_delay`` is the number of seconds slept before each stage. It is
    zero by default and only meant for demos or throttling in tests.
    """

    min_text_length: int = 50
    min_credential_length: int = 10
    stage_delay: float = 0.0
    max_template_bytes: int = MAX_TEMPLATE_BYTES

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "PipelineSettings":
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            min_text_length=_env_int("MIN_TEXT_LENGTH", defaults.min_text_length),
            min_credential_length=_env_int(
                "MIN_CREDENTIAL_LENGTH", defaults.min_credential_length
            ),
            stage_delay=_env_float("STAGE_DELAY", defaults.stage_delay),
            max_template_bytes=_env_int("MAX_TEMPLATE_BYTES", defaults.max_template_bytes),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        LOGGER.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        LOGGER.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
        return default
