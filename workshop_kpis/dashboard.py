"""
Dashboard-ready output functions.

These are the primary entry points for a front end. Each function is a
pure read over the location index it is handed and returns plain dicts or
DataFrames suitable for rendering cards, counters, and tables. The front
end owns the "currently selected location" and calls query_view again
when it changes.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import pandas as pd

from .categories import categorise
from .config import ALL_LOCATIONS, LOCATION_ROSTER
from .kpis import calc_achievement, count_rollup, get_executive_summary, get_headline_figures
from .transforms import aggregate_all, build_metric_frame, empty_metric_frame, normalise_row

logger = logging.getLogger(__name__)

LocationIndex = Mapping[str, Sequence[Mapping[str, Any]]]


def get_location_metrics_frame(location_index: LocationIndex, selector: str) -> pd.DataFrame:
    """Metric frame for one location, or every location merged by name."""
    if selector == ALL_LOCATIONS:
        return aggregate_all(location_index, normalise_row)

    rows = location_index.get(selector)
    if not rows:
        logger.warning("No data for location '%s'", selector)
        return empty_metric_frame()
    return build_metric_frame(rows, normalise_row)


def query_view(
    location_index: LocationIndex,
    selector: str = ALL_LOCATIONS,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Single entry point a front end calls to populate the category views.

    Parameters
    ----------
    location_index : Snapshot mapping location name -> raw rows. Not mutated.
    selector : "All Locations" to merge every location present in the
               index, or a single location name.
    keywords : Category -> keyword list table. Defaults to
               config.CATEGORY_KEYWORDS; its key order is the category order.

    Returns
    -------
    {
        "location": selector,
        "metrics": metric frame,
        "by_category": {category: metric frame}, in table order,
        "counts_by_category": {category: rollup counts},
        "overall_counts": rollup counts over the category pulls
                          concatenated (metrics in no category are not
                          counted; a metric in two categories counts twice),
    }
    An empty index or unknown location gives empty frames and zero counts.
    """
    metrics = get_location_metrics_frame(location_index, selector)
    by_category = categorise(metrics, keywords)
    counts_by_category = {
        category: count_rollup(frame) for category, frame in by_category.items()
    }

    pulled = [frame for frame in by_category.values() if not frame.empty]
    categorised = pd.concat(pulled, ignore_index=True) if pulled else empty_metric_frame()
    overall_counts = count_rollup(categorised)

    logger.info(
        "View for '%s': %d metrics, %d categorised rows",
        selector, len(metrics), len(categorised),
    )
    return {
        "location": selector,
        "metrics": metrics,
        "by_category": by_category,
        "counts_by_category": counts_by_category,
        "overall_counts": overall_counts,
    }


def get_manager_overview(
    location_index: LocationIndex,
    selector: str = ALL_LOCATIONS,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Headline cards (throughput, labour, conversion) and counts for the selected view."""
    metrics = get_location_metrics_frame(location_index, selector)
    return get_executive_summary(metrics, keywords)


def get_location_options(location_index: LocationIndex) -> list[str]:
    """Return selector options for UI dropdowns: "All Locations" first."""
    return [ALL_LOCATIONS, *location_index.keys()]


def get_record_counts(location_index: LocationIndex) -> dict[str, int]:
    """Number of raw rows held per location."""
    return {location: len(rows or []) for location, rows in location_index.items()}


def get_location_metrics(
    location_index: LocationIndex,
    location: str,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Throughput, labour and parts headline figures for one location.

    Labour and parts sum every matching metric except per-RO ratios and
    recompute achievement from the sums. A location with no rows gives
    zero figures.
    """
    metrics = build_metric_frame(location_index.get(location), normalise_row)
    return get_headline_figures(metrics, keywords=keywords)


def get_regional_summary(
    location_index: LocationIndex,
    locations: Iterable[str] | None = None,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> dict:
    """Cross-location headline view.

    Parameters
    ----------
    location_index : Snapshot mapping location name -> raw rows.
    locations : Locations to report on. Defaults to LOCATION_ROSTER.
    keywords : Category keyword overrides for the labour and parts figures.

    Returns
    -------
    {
        "throughput" / "labour" / "parts": {"target", "actual", "achievement"}
            summed over locations, achievement recomputed from the sums,
        "locations": {location: get_location_metrics(...)},
        "active_locations": number of locations reported on,
        "locations_with_data": number of locations present in the index,
        "by_location": DataFrame[location, target, actual, achievement] for
            locations with a positive labour + parts target,
    }
    """
    locations = list(LOCATION_ROSTER if locations is None else locations)
    per_location = {loc: get_location_metrics(location_index, loc, keywords) for loc in locations}

    summary: dict = {}
    for key in ("throughput", "labour", "parts"):
        target = sum(m[key]["target"] for m in per_location.values())
        actual = sum(m[key]["actual"] for m in per_location.values())
        summary[key] = {
            "target": target,
            "actual": actual,
            "achievement": calc_achievement(actual, target),
        }

    rows = [
        {
            "location": loc,
            "target": m["total_target"],
            "actual": m["total_actual"],
            "achievement": calc_achievement(m["total_actual"], m["total_target"]),
        }
        for loc, m in per_location.items()
        if m["total_target"] > 0
    ]
    by_location = pd.DataFrame(rows, columns=["location", "target", "actual", "achievement"])

    summary["locations"] = per_location
    summary["active_locations"] = len(locations)
    summary["locations_with_data"] = len(location_index)
    summary["by_location"] = by_location
    return summary
