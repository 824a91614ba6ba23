"""Ingestion boundary: record translation, validation and location grouping."""

from .records import build_location_index, canonicalise_record, validate_record
from .utils import is_blank, safe_float, to_snake_case

__all__ = [
    "build_location_index",
    "canonicalise_record",
    "validate_record",
    "is_blank",
    "safe_float",
    "to_snake_case",
]
