"""
Configuration: location roster, category keyword table, thresholds,
raw-row schema.

CATEGORY_KEYWORDS maps each dashboard category to the case-insensitive
substrings that pull a metric into it. Editing the table changes which
cards a metric shows up on, so keep it here rather than at call sites.
"""

# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------
ALL_LOCATIONS = "All Locations"

LOCATION_ROSTER: list[str] = [
    "Kalina",
    "Sewri",
    "Reayroad",
    "Bhandup",
    "Dockyard Road",
]

# ---------------------------------------------------------------------------
# Category keyword table
# ---------------------------------------------------------------------------
# Order matters: it is the order categories are reported in and the order
# the overall rollup concatenates them.
CATEGORIES: tuple[str, ...] = ("Inflow", "Labour", "Parts", "Efficiency")

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Inflow": ("throughput", "inflow"),
    "Labour": ("labour", "labor"),
    "Parts": ("parts", "accessories", "oil"),
    "Efficiency": (
        "conversion",
        "efficiency",
        "cleaning",
        "service",
        "nps",
        "connect",
        "complaints",
        "alignment",
        "balancing",
        "pmc",
        "cash",
        "insurance",
    ),
}

# Per-repair-order ratios are averages, summing them is meaningless
HEADLINE_EXCLUDE_KEYWORDS: tuple[str, ...] = ("per ro",)

# ---------------------------------------------------------------------------
# Achievement buckets (percent)
# ---------------------------------------------------------------------------
# achieved      >= ACHIEVED_THRESHOLD
# below_target  >= BELOW_TARGET_THRESHOLD and < ACHIEVED_THRESHOLD
# needs_action  <  BELOW_TARGET_THRESHOLD
ACHIEVED_THRESHOLD = 100.0
BELOW_TARGET_THRESHOLD = 70.0

STATUS_ACHIEVED = "achieved"
STATUS_BELOW_TARGET = "below_target"
STATUS_NEEDS_ACTION = "needs_action"

# ---------------------------------------------------------------------------
# Raw row schema
# ---------------------------------------------------------------------------
RAW_FIELDS: tuple[str, ...] = (
    "tags",
    "parameters",
    "monthly_target",
    "target_mtd",
    "actual_as_on_date",
    "shortfall",
    "percentage_ach",
    "location",
)

NUMERIC_FIELDS: tuple[str, ...] = (
    "monthly_target",
    "target_mtd",
    "actual_as_on_date",
    "shortfall",
    "percentage_ach",
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "tags",
    "parameters",
    "monthly_target",
    "target_mtd",
    "actual_as_on_date",
    "shortfall",
    "percentage_ach",
)

# Mapping from upload-sheet headers to canonical raw field names
FIELD_ALIASES: dict[str, str] = {
    "Tags": "tags",
    "Parameters": "parameters",
    "Monthly Target": "monthly_target",
    "Target MTD": "target_mtd",
    "Actual As On Date": "actual_as_on_date",
    "Shortfall": "shortfall",
    "% ACH": "percentage_ach",
    "Location": "location",
}

# ---------------------------------------------------------------------------
# Metric frame schema
# ---------------------------------------------------------------------------
METRIC_COLUMNS: list[str] = ["name", "target", "actual", "shortfall", "achievement"]
