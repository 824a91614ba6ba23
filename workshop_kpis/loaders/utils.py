"""
Shared utilities for row ingestion: numeric coercion, blank detection,
header normalisation.
"""

import logging
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


def is_blank(val: Any) -> bool:
    """True for None, NaN/NA and empty or whitespace-only strings."""
    if val is None:
        return True
    if isinstance(val, str):
        return not val.strip()
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def safe_float(val: Any) -> float | None:
    """Coerce a value to float, returning None for missing or non-numeric values."""
    if is_blank(val):
        return None
    if isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = val.strip().replace(",", "")
        # Handle percentage strings like "78%"
        if val.endswith("%"):
            val = val[:-1]
        try:
            result = float(val)
        except ValueError:
            return None
    else:
        try:
            result = float(val)
        except (ValueError, TypeError):
            return None
    if pd.isna(result):
        return None
    return result


def to_snake_case(name: str) -> str:
    """Header -> snake_case key, for store exports not covered by FIELD_ALIASES.

    "Actual As On Date" -> "actual_as_on_date", "monthlyTarget" ->
    "monthly_target", "target-mtd" -> "target_mtd".
    """
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", str(name).strip())
    return "_".join(re.findall(r"[a-z0-9]+", words.lower()))
