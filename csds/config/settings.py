"""Runtime settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}={raw!r}; using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    value = _env_float(name, float(default))
    if value <= 0:
        logger.warning(f"{name} must be positive; using default {default}")
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    chunk_threshold_bytes: int
    chunk_size: int
    output_limit_bytes: int
    analysis_url: str
    analysis_timeout: float
    api_key: Optional[str]
    tmp_root: str


def load_settings() -> Settings:
    """Build settings from the current environment; nothing is cached."""
    return Settings(
        chunk_threshold_bytes=int(_env_float("CSDS_CHUNK_THRESHOLD_MB", 5) * MB),
        chunk_size=_env_int("CSDS_CHUNK_SIZE", 5000),
        output_limit_bytes=int(_env_float("CSDS_OUTPUT_LIMIT_MB", 15) * MB),
        analysis_url=os.getenv("CSDS_ANALYSIS_URL", "http://localhost:5000/run-r"),
        analysis_timeout=_env_float("CSDS_ANALYSIS_TIMEOUT", 300.0),
        api_key=os.getenv("CSDS_API_KEY") or None,
        tmp_root=os.getenv("TMP_ROOT", "/tmp/csds"),
    )
