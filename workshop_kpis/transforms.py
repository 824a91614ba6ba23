"""
Data transforms: normalise raw location rows into metric frames and
merge same-named metrics across locations.

A metric frame is a DataFrame with the columns in config.METRIC_COLUMNS.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import numpy as np
import pandas as pd

from .config import METRIC_COLUMNS
from .loaders.utils import is_blank, safe_float

logger = logging.getLogger(__name__)

_SUMMED_COLUMNS = ["target", "actual", "shortfall"]


def empty_metric_frame() -> pd.DataFrame:
    """Return an empty metric frame with the canonical schema and dtypes."""
    return pd.DataFrame(
        {
            "name": pd.Series(dtype=object),
            "target": pd.Series(dtype="float64"),
            "actual": pd.Series(dtype="float64"),
            "shortfall": pd.Series(dtype="float64"),
            "achievement": pd.Series(dtype="float64"),
        },
        columns=METRIC_COLUMNS,
    )


def normalise_row(row: Mapping[str, Any]) -> dict:
    """Convert one raw row into a metric dict.

    Rules
    -----
    - name: ``parameters``, falling back to ``tags`` when parameters is blank.
    - target: ``monthly_target``; missing or non-numeric -> 0.
      ``target_mtd`` is display-only and never used as a fallback.
    - actual, shortfall: missing or non-numeric -> 0.
    - achievement: ``percentage_ach`` as given. Missing or non-numeric
      -> NaN (not applicable); an explicit 0 stays 0.

    Never raises on malformed values.
    """
    parameters = row.get("parameters")
    tags = row.get("tags")
    if not is_blank(parameters):
        name = str(parameters)
    elif not is_blank(tags):
        name = str(tags)
    else:
        name = ""

    achievement = safe_float(row.get("percentage_ach"))

    return {
        "name": name,
        "target": safe_float(row.get("monthly_target")) or 0.0,
        "actual": safe_float(row.get("actual_as_on_date")) or 0.0,
        "shortfall": safe_float(row.get("shortfall")) or 0.0,
        "achievement": np.nan if achievement is None else achievement,
    }


def build_metric_frame(
    rows: Iterable[Mapping[str, Any]] | None,
    normalise_fn: Callable[[Mapping[str, Any]], dict] = normalise_row,
) -> pd.DataFrame:
    """Normalise a sequence of raw rows into a metric frame (row order kept)."""
    records = [normalise_fn(row) for row in (rows or [])]
    if not records:
        return empty_metric_frame()

    df = pd.DataFrame(records, columns=METRIC_COLUMNS)
    df = df.astype({col: "float64" for col in METRIC_COLUMNS if col != "name"})
    logger.debug("Built metric frame with %d rows", len(df))
    return df


def aggregate_all(
    location_index: Mapping[str, Sequence[Mapping[str, Any]]],
    normalise_fn: Callable[[Mapping[str, Any]], dict] = normalise_row,
    locations: Iterable[str] | None = None,
) -> pd.DataFrame:
    """Merge same-named metrics across locations.

    Parameters
    ----------
    location_index : Mapping of location name to its raw rows.
    normalise_fn : Row -> metric dict converter.
    locations : Locations to fold, in order. Defaults to the index's own
                key order. Locations missing from the index, or with no
                rows, contribute nothing.

    Rules
    -----
    - Names are matched exactly (case-sensitive).
    - target, actual and shortfall are summed.
    - A name seen more than once gets its achievement recomputed from the
      summed values: (actual / target) * 100 if target > 0, else 0. The
      per-row achievements are never averaged or added.
    - A name seen once keeps its source achievement (NaN included).
    - Output order is first-seen order of names.

    Returns
    -------
    Metric frame with one row per distinct name.
    """
    if locations is None:
        locations = list(location_index.keys())

    frames = []
    for location in locations:
        rows = location_index.get(location)
        if not rows:
            logger.debug("No rows for location '%s' — skipping", location)
            continue
        frames.append(build_metric_frame(rows, normalise_fn))

    if not frames:
        return empty_metric_frame()

    combined = pd.concat(frames, ignore_index=True)
    grouped = combined.groupby("name", sort=False)

    result = grouped[_SUMMED_COLUMNS].sum()
    occurrences = grouped.size()
    # Only names seen once read this; groupby.first() would skip NaN
    source_achievement = (
        combined.drop_duplicates("name", keep="first").set_index("name")["achievement"]
    )

    recomputed = (result["actual"] / result["target"] * 100).where(result["target"] > 0, 0.0)
    result["achievement"] = recomputed.where(
        occurrences > 1, source_achievement.reindex(result.index)
    )

    result = result.reset_index()[METRIC_COLUMNS]
    result = result.astype({col: "float64" for col in METRIC_COLUMNS if col != "name"})

    logger.info(
        "Aggregated %d metric rows from %d locations into %d metrics",
        len(combined), len(frames), len(result),
    )
    return result
