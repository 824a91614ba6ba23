"""
Category classification by case-insensitive substring match on metric names.
"""

import logging
import re
from collections.abc import Mapping, Sequence

import pandas as pd

from .config import CATEGORIES, CATEGORY_KEYWORDS
from .transforms import empty_metric_frame

logger = logging.getLogger(__name__)


def _name_matches(names: pd.Series, keywords: Sequence[str]) -> pd.Series:
    """Boolean mask: name non-empty and contains any keyword (case-folded)."""
    folded = names.fillna("").astype(str).str.casefold()
    if not keywords:
        return pd.Series(False, index=names.index)
    pattern = "|".join(re.escape(k.casefold()) for k in keywords)
    return folded.ne("") & folded.str.contains(pattern, regex=True)


def classify(
    metrics: pd.DataFrame,
    category: str,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> pd.DataFrame:
    """Return the metrics belonging to `category`, order preserved.

    A metric belongs to a category when its name, case-folded, contains at
    least one of the category's keywords. Matching is substring, not
    whole-word: "Total Labour (PMGR+BP+VAS+AMC rendered)" is Labour.
    Metrics with an empty name never match.

    An unknown category yields an empty frame.
    """
    table = CATEGORY_KEYWORDS if keywords is None else keywords
    if category not in table:
        logger.warning("Unknown category '%s' — returning no metrics", category)
        return empty_metric_frame()

    if metrics.empty:
        return empty_metric_frame()

    mask = _name_matches(metrics["name"], table[category])
    return metrics[mask].reset_index(drop=True)


def categorise(
    metrics: pd.DataFrame,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, pd.DataFrame]:
    """Classify `metrics` into every category, in category order.

    Categories are pulled independently, so a name matching two keyword
    lists appears under both.
    """
    table = CATEGORY_KEYWORDS if keywords is None else keywords
    categories = CATEGORIES if keywords is None else tuple(table.keys())
    return {category: classify(metrics, category, table) for category in categories}


def unclassified(
    metrics: pd.DataFrame,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> pd.DataFrame:
    """Return the metrics that match no category."""
    if metrics.empty:
        return empty_metric_frame()

    table = CATEGORY_KEYWORDS if keywords is None else keywords
    matched = pd.Series(False, index=metrics.index)
    for category_keywords in table.values():
        matched |= _name_matches(metrics["name"], category_keywords)
    return metrics[~matched].reset_index(drop=True)
