"""Configuration management for the finance tracker.

This module centralizes the configuration values used by the aggregation
engine: currencies, ABC classification thresholds, category fallbacks and
list paging.  Every tunable value can be overridden with an environment
variable.
"""

from __future__ import annotations

import os
from typing import Tuple


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


# Currencies
HOME_CURRENCY = os.getenv("FINTRACK_HOME_CURRENCY", "ARS").strip().upper()
FOREIGN_CURRENCY = os.getenv("FINTRACK_FOREIGN_CURRENCY", "USD").strip().upper()

# Transaction types
INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

# ABC / Pareto classification: cumulative percentage ceilings for A and B
ABC_A_THRESHOLD = _env_float("FINTRACK_ABC_A_THRESHOLD", 80.0)
ABC_B_THRESHOLD = _env_float("FINTRACK_ABC_B_THRESHOLD", 90.0)

# Category fallbacks for ids that no longer resolve
UNKNOWN_CATEGORY_NAME = "Unknown"
FALLBACK_CATEGORY_COLOR = "#9ca3af"

# Transaction list
ITEMS_PER_PAGE = _env_int("FINTRACK_ITEMS_PER_PAGE", 15)
MAX_DESCRIPTION_LENGTH = 255

# Logging
LOG_LEVEL_ENV = "FINTRACK_LOG_LEVEL"


def currencies() -> Tuple[str, str]:
    """Return the supported (home, foreign) currency codes."""
    return (HOME_CURRENCY, FOREIGN_CURRENCY)


def get_abc_thresholds() -> Tuple[float, float]:
    """Return the configured (A, B) cumulative percentage ceilings.

    Raises ``ValueError`` when the pair is not ordered or falls outside
    the 0..100 range.
    """
    a, b = ABC_A_THRESHOLD, ABC_B_THRESHOLD
    if not (0 <= a <= 100 and 0 <= b <= 100):
        raise ValueError(f"ABC thresholds must lie within 0..100, got A={a}, B={b}")
    if a > b:
        raise ValueError(f"ABC threshold A ({a}) cannot exceed B ({b})")
    return (a, b)
