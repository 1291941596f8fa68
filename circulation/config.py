"""
Runtime settings for the circulation service.

Every value can be overridden through an environment variable so the same
build runs locally and behind the report scheduler.
"""
import logging
import math
import os
from typing import Tuple


def _parse_thresholds(raw: str) -> Tuple[int, ...]:
    values = tuple(int(part) for part in raw.split(",") if part.strip())
    if not values:
        raise ValueError(f"CIRCULATION_THRESHOLDS must list at least one integer, got {raw!r}")
    if any(k < 1 for k in values):
        raise ValueError(f"CIRCULATION_THRESHOLDS values must be >= 1, got {raw!r}")
    if len(set(values)) != len(values):
        raise ValueError(f"CIRCULATION_THRESHOLDS must not repeat a value, got {raw!r}")
    return values


def _parse_epsilon(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"CIRCULATION_PEEL_EPSILON must be a finite positive number, got {raw!r}")
    return value


# Minimum cycle lengths reported by default (2 excludes self-loops)
DEFAULT_THRESHOLDS = _parse_thresholds(os.getenv("CIRCULATION_THRESHOLDS", "2,3,4,5"))

# Residual amounts below this are treated as zero and the edge is dropped
PEEL_EPSILON = _parse_epsilon(os.getenv("CIRCULATION_PEEL_EPSILON", "1e-9"))

LOG_LEVEL = os.getenv("CIRCULATION_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

HOST = os.getenv("CIRCULATION_HOST", "0.0.0.0")
PORT = int(os.getenv("CIRCULATION_PORT", "8000"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install the service log format on the root logger (no-op if already configured)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
