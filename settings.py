from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_HAZARD_WEIGHT_ENV = "CEIM_DEFAULT_HAZARD_WEIGHT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    default_hazard_weight: float
    log_level: str


def _read_hazard_weight(default: float) -> float:
    value = os.getenv(_HAZARD_WEIGHT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0.0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        default_hazard_weight=_read_hazard_weight(1.0),
        log_level=_read_log_level("INFO"),
    )
