"""
Simulated data generator for the workshop KPI dashboard.

Generates realistic per-location performance rows based on typical
service-workshop parameters. All values are synthetic.
"""

import numpy as np
import pandas as pd

from .config import LOCATION_ROSTER

# ---------------------------------------------------------------------------
# Typical workshop parameters (monthly targets)
# ---------------------------------------------------------------------------
# (tag, parameter, monthly_target, std as fraction of target)
_PARAMETERS = [
    ("INFLOW", "TOTAL THROUGHPUT", 900, 0.12),
    ("INFLOW", "PM THROUGHPUT", 464, 0.15),
    ("INFLOW", "BP THROUGHPUT", 180, 0.20),
    ("LABOUR", "PM GR LABOUR", 2_142_723, 0.15),
    ("LABOUR", "BP LABOUR", 950_000, 0.20),
    ("LABOUR", "TOTAL LABOUR (PMGR+BP+VAS+AMC RENDERED)", 3_600_000, 0.12),
    ("LABOUR", "LABOUR PER RO", 3_900, 0.08),
    ("PARTS", "MGR PARTS SALE", 2_938_579, 0.12),
    ("PARTS", "ACCESSORIES SALE", 420_000, 0.25),
    ("PARTS", "OIL SALE", 610_000, 0.15),
    ("PARTS", "PARTS PER RO", 5_200, 0.08),
    ("EFFICIENCY", "SERVICE CONVERSION", 85, 0.10),
    ("EFFICIENCY", "NPS SCORE", 80, 0.08),
    ("EFFICIENCY", "WHEEL ALIGNMENT", 210, 0.20),
    ("EFFICIENCY", "WHEEL BALANCING", 190, 0.20),
    ("EFFICIENCY", "CASHLESS INSURANCE CLAIMS", 60, 0.25),
    ("EFFICIENCY", "CUSTOMER COMPLAINTS CLOSED", 40, 0.15),
]

# Per-location performance bias (multiplier on target)
_LOCATION_BIAS = {
    "Kalina": 0.86,
    "Sewri": 1.04,
    "Reayroad": 0.93,
    "Bhandup": 0.78,
    "Dockyard Road": 1.00,
}


def generate_location_rows(
    location: str,
    rng: np.random.Generator,
    missing_achievement_rate: float = 0.0,
) -> list[dict]:
    """Generate one month-to-date row per parameter for a location.

    Shortfall follows the upload sheet's convention: actual - target
    (negative when under target).
    """
    bias = _LOCATION_BIAS.get(location, 0.95)
    rows = []

    for tag, parameter, target, std in _PARAMETERS:
        actual = target * bias + rng.normal(0, target * std)
        actual = round(max(actual, 0.0), 0)

        achievement = round(actual / target * 100) if target else 0
        if missing_achievement_rate and rng.uniform() < missing_achievement_rate:
            achievement = None

        rows.append({
            "tags": tag,
            "parameters": parameter,
            "monthly_target": float(target),
            "target_mtd": float(target),
            "actual_as_on_date": actual,
            "shortfall": actual - target,
            "percentage_ach": achievement,
            "location": location,
        })

    return rows


def generate_location_index(
    locations: list[str] | None = None,
    seed: int = 42,
    missing_achievement_rate: float = 0.0,
) -> dict[str, list[dict]]:
    """Generate a simulated location index.

    Parameters
    ----------
    locations : Locations to generate. Defaults to LOCATION_ROSTER.
    seed : RNG seed; the same seed gives the same index.
    missing_achievement_rate : Fraction of rows with no % ACH value.
    """
    rng = np.random.default_rng(seed)
    locations = LOCATION_ROSTER if locations is None else locations
    return {
        location: generate_location_rows(location, rng, missing_achievement_rate)
        for location in locations
    }


def generate_upload_frame(location: str, seed: int = 42) -> pd.DataFrame:
    """Generate one location's rows as an upload sheet (display headers)."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame(generate_location_rows(location, rng))
    return df.rename(columns={
        "tags": "Tags",
        "parameters": "Parameters",
        "monthly_target": "Monthly Target",
        "target_mtd": "Target MTD",
        "actual_as_on_date": "Actual As On Date",
        "shortfall": "Shortfall",
        "percentage_ach": "% ACH",
        "location": "Location",
    })
