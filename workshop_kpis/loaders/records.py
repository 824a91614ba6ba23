"""
Ingestion boundary: translate uploaded/stored records into canonical raw
rows and group them into a location index.

Upload sheets use display headers ("Monthly Target", "% ACH"); the store
uses snake_case columns (monthly_target, percentage_ach). Both are mapped
onto config.RAW_FIELDS here so the core only ever sees one schema.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from ..config import FIELD_ALIASES, NUMERIC_FIELDS, RAW_FIELDS, REQUIRED_FIELDS
from .utils import is_blank, safe_float, to_snake_case

logger = logging.getLogger(__name__)


def canonicalise_record(record: Mapping[str, Any]) -> dict:
    """Rename a record's keys to canonical raw field names.

    Keys are matched against FIELD_ALIASES first, then by snake_case form.
    Keys that map to no raw field are dropped.
    """
    row: dict = {}
    for key, val in record.items():
        field = FIELD_ALIASES.get(str(key).strip()) or to_snake_case(key)
        if field in RAW_FIELDS:
            row[field] = val
    return row


def validate_record(row: Mapping[str, Any]) -> list[str]:
    """Return a list of problems with a canonical row (empty if valid).

    Checks that every required field is present and that numeric fields
    parse as numbers.
    """
    errors = []
    for field in REQUIRED_FIELDS:
        if is_blank(row.get(field)):
            errors.append(f"Missing required field: {field}")
    for field in NUMERIC_FIELDS:
        val = row.get(field)
        if not is_blank(val) and safe_float(val) is None:
            errors.append(f"Invalid numeric value in field: {field}")
    return errors


def _iter_records(records: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(records, pd.DataFrame):
        return records.to_dict("records")
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise ValueError(
            f"Expected a DataFrame or an iterable of records, got {type(records).__name__}"
        )
    return records


def build_location_index(
    records: pd.DataFrame | Iterable[Mapping[str, Any]],
    location: str | None = None,
    validate: bool = True,
) -> dict[str, list[dict]]:
    """Group records into a location index.

    Parameters
    ----------
    records : DataFrame or iterable of mappings, with display or canonical
              headers.
    location : When given, every row is filed under this location (an upload
               for a chosen location). Otherwise each row's own ``location``
               field is used and rows without one are dropped.
    validate : Drop rows failing validate_record.

    Returns
    -------
    Dict of location -> list of canonical rows, locations in first-seen
    order, rows in input order.
    """
    index: dict[str, list[dict]] = {}
    dropped = 0

    for i, record in enumerate(_iter_records(records)):
        row = canonicalise_record(record)

        if location is not None:
            row["location"] = location
        elif is_blank(row.get("location")):
            logger.warning("Row %d has no location — dropped", i)
            dropped += 1
            continue
        else:
            row["location"] = str(row["location"]).strip()

        if validate:
            errors = validate_record(row)
            if errors:
                logger.warning("Row %d dropped: %s", i, "; ".join(errors))
                dropped += 1
                continue

        index.setdefault(row["location"], []).append(row)

    logger.info(
        "Built location index: %d locations, %d rows, %d dropped",
        len(index), sum(len(rows) for rows in index.values()), dropped,
    )
    return index
