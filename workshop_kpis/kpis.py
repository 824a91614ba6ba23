"""
KPI computation functions — pure functions with no side effects.

Provides achievement recomputation, achievement bucketing, rollup counts,
and the headline figures behind the executive summary cards.
"""

import logging
from collections.abc import Mapping, Sequence

import pandas as pd

from .config import (
    ACHIEVED_THRESHOLD,
    BELOW_TARGET_THRESHOLD,
    CATEGORY_KEYWORDS,
    HEADLINE_EXCLUDE_KEYWORDS,
    STATUS_ACHIEVED,
    STATUS_BELOW_TARGET,
    STATUS_NEEDS_ACTION,
)
from .categories import classify

logger = logging.getLogger(__name__)


def calc_achievement(actual: float, target: float) -> float:
    """Return achievement percentage (actual / target * 100).

    A target of zero or less yields 0.0, not NaN: "no target set" is a
    real value, distinct from "no data".
    """
    if target > 0:
        return (actual / target) * 100
    return 0.0


def achievement_status(achievement: float) -> str | None:
    """Return 'achieved', 'below_target' or 'needs_action'.

    Logic
    -----
    achieved      if achievement >= 100
    below_target  if 70 <= achievement < 100
    needs_action  otherwise

    Returns None for NaN (not applicable).
    """
    if pd.isna(achievement):
        return None
    if achievement >= ACHIEVED_THRESHOLD:
        return STATUS_ACHIEVED
    if achievement >= BELOW_TARGET_THRESHOLD:
        return STATUS_BELOW_TARGET
    return STATUS_NEEDS_ACTION


def count_rollup(metrics: pd.DataFrame) -> dict:
    """Tally a metric frame into achievement buckets.

    Metrics with NaN achievement are left out entirely, so
    achieved + below_target + needs_action == total always holds.

    Returns
    -------
    {"achieved": int, "below_target": int, "needs_action": int, "total": int}
    """
    if metrics.empty:
        return {"achieved": 0, "below_target": 0, "needs_action": 0, "total": 0}

    achievement = pd.to_numeric(metrics["achievement"], errors="coerce").dropna()

    achieved = achievement >= ACHIEVED_THRESHOLD
    below_target = (achievement >= BELOW_TARGET_THRESHOLD) & ~achieved
    needs_action = achievement < BELOW_TARGET_THRESHOLD

    return {
        "achieved": int(achieved.sum()),
        "below_target": int(below_target.sum()),
        "needs_action": int(needs_action.sum()),
        "total": int(len(achievement)),
    }


# ---------------------------------------------------------------------------
# Headline figures
# ---------------------------------------------------------------------------
def _contains_all(names: pd.Series, fragments: Sequence[str]) -> pd.Series:
    folded = names.fillna("").astype(str).str.casefold()
    mask = pd.Series(True, index=names.index)
    for fragment in fragments:
        mask &= folded.str.contains(fragment, regex=False)
    return mask


def find_metric(metrics: pd.DataFrame, *fragments: str) -> dict | None:
    """Return the first metric whose name contains every fragment, or None."""
    if metrics.empty:
        return None
    matches = metrics[_contains_all(metrics["name"], fragments)]
    if matches.empty:
        return None
    return matches.iloc[0].to_dict()


def sum_metrics(metrics: pd.DataFrame, name: str = "") -> dict:
    """Sum target/actual/shortfall and recompute achievement from the sums."""
    target = float(metrics["target"].sum()) if not metrics.empty else 0.0
    actual = float(metrics["actual"].sum()) if not metrics.empty else 0.0
    shortfall = float(metrics["shortfall"].sum()) if not metrics.empty else 0.0
    return {
        "name": name,
        "target": target,
        "actual": actual,
        "shortfall": shortfall,
        "achievement": calc_achievement(actual, target),
    }


def exclude_names(
    metrics: pd.DataFrame,
    keywords: Sequence[str] = HEADLINE_EXCLUDE_KEYWORDS,
) -> pd.DataFrame:
    """Drop metrics whose name contains any of `keywords` (case-folded)."""
    if metrics.empty or not keywords:
        return metrics
    folded = metrics["name"].fillna("").astype(str).str.casefold()
    keep = pd.Series(True, index=metrics.index)
    for keyword in keywords:
        keep &= ~folded.str.contains(keyword.casefold(), regex=False)
    return metrics[keep].reset_index(drop=True)


def _headline_table(keywords: Mapping[str, Sequence[str]] | None) -> dict:
    """Default keyword table with any caller overrides laid on top."""
    return {**CATEGORY_KEYWORDS, **(keywords or {})}


def get_executive_summary(
    metrics: pd.DataFrame,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Return a dict suitable for top-level dashboard cards.

    Parameters
    ----------
    metrics : Metric frame for one location or the aggregated view.
    keywords : Category keyword overrides; categories not given keep the
               config.CATEGORY_KEYWORDS entry.

    Returns
    -------
    Dict with structure:
    {
        "throughput":    metric dict named like "total throughput" or None,
                         NaN achievement reported as 0,
        "pm_throughput": metric dict named like "pm throughput" or None,
        "labour":        "total ... labour" metric, else sum of all labour
                         metrics, or None; achievement always recomputed
                         from actual / target,
        "conversion":    first efficiency metric containing "conversion" or None,
        "counts":        rollup counts over every metric, categorised or not,
    }
    """
    table = _headline_table(keywords)
    inflow = classify(metrics, "Inflow", table)
    labour = classify(metrics, "Labour", table)
    efficiency = classify(metrics, "Efficiency", table)

    throughput = find_metric(inflow, "total throughput")
    if throughput is not None and pd.isna(throughput["achievement"]):
        throughput["achievement"] = 0.0

    total_labour = find_metric(labour, "total", "labour")
    if total_labour is None and not labour.empty:
        total_labour = sum_metrics(labour, name="Total Labour")
    if total_labour is not None:
        total_labour["achievement"] = calc_achievement(
            total_labour["actual"], total_labour["target"]
        )

    summary = {
        "throughput": throughput,
        "pm_throughput": find_metric(inflow, "pm throughput"),
        "labour": total_labour,
        "conversion": find_metric(efficiency, "conversion"),
        "counts": count_rollup(metrics),
    }

    missing = [key for key, value in summary.items() if value is None]
    if missing and not metrics.empty:
        logger.info("Executive summary has no metric for: %s", ", ".join(missing))
    return summary


def get_headline_figures(
    metrics: pd.DataFrame,
    exclude_keywords: Sequence[str] = HEADLINE_EXCLUDE_KEYWORDS,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Throughput, labour and parts figures for one location's metrics.

    Returns
    -------
    {
        "throughput": {"target", "actual", "achievement"}  (source achievement),
        "labour":     {"target", "actual", "achievement"}  (recomputed),
        "parts":      {"target", "actual", "achievement"}  (recomputed),
        "total_target": labour + parts target,
        "total_actual": labour + parts actual,
    }
    Missing figures are zero-filled. `keywords` overrides category keyword
    lists as in get_executive_summary.
    """
    table = _headline_table(keywords)
    throughput = find_metric(metrics, "total throughput")
    if throughput is None:
        throughput_figures = {"target": 0.0, "actual": 0.0, "achievement": 0.0}
    else:
        achievement = throughput["achievement"]
        throughput_figures = {
            "target": float(throughput["target"]),
            "actual": float(throughput["actual"]),
            "achievement": 0.0 if pd.isna(achievement) else float(achievement),
        }

    figures = {"throughput": throughput_figures}
    for key, category in (("labour", "Labour"), ("parts", "Parts")):
        # Only the category's primary keyword counts towards its headline
        primary = tuple(table[category])[:1]
        matched = exclude_names(classify(metrics, category, {category: primary}), exclude_keywords)
        total = sum_metrics(matched)
        figures[key] = {
            "target": total["target"],
            "actual": total["actual"],
            "achievement": total["achievement"],
        }

    figures["total_target"] = figures["labour"]["target"] + figures["parts"]["target"]
    figures["total_actual"] = figures["labour"]["actual"] + figures["parts"]["actual"]
    return figures
