"""
Runtime configuration read from environment variables.

Integer settings are bounds-checked; an unparsable or out-of-range value logs
a warning and falls back to the default rather than refusing to start.
"""

from __future__ import annotations

import logging
import os
from typing import List

logger = logging.getLogger(__name__)


def env_int(name: str, default: int, maximum: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError) as e:
        logger.warning(
            f"Invalid {name} value: {raw}. Error: {e}. Using default: {default}"
        )
        return default
    if value <= 0:
        logger.warning(
            f"Invalid {name} value: {raw}. Must be positive. Using default: {default}"
        )
        return default
    if value > maximum:
        logger.warning(
            f"{name} value {value} exceeds maximum ({maximum}). "
            f"Using default: {default}"
        )
        return default
    return value


def env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() == "true"


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


HOST = os.getenv("HOST", "0.0.0.0")
PORT = env_int("PORT", 3000, 65535)
MAX_BODY_MB = env_int("MAX_BODY_MB", 50, 512)
