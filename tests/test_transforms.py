"""
tests/test_transforms.py

Unit tests for row normalisation and cross-location aggregation.

Coverage
--------
- Name fallback from parameters to tags
- Numeric fallbacks to 0 for missing / malformed values
- Missing achievement -> NaN, explicit zero kept as 0
- Normalisation is pure and repeatable
- Aggregation recomputes achievement from summed totals
- First-seen ordering, missing / empty locations
- Inputs are not mutated
"""

from __future__ import annotations

import copy
import math

import numpy as np
import pandas as pd
import pytest

from tests.conftest import make_row
from workshop_kpis.config import METRIC_COLUMNS
from workshop_kpis.transforms import (
    aggregate_all,
    build_metric_frame,
    empty_metric_frame,
    normalise_row,
)


# ---------------------------------------------------------------------------
# normalise_row
# ---------------------------------------------------------------------------


class TestNormaliseRow:
    def test_maps_canonical_fields(self) -> None:
        metric = normalise_row(make_row("PM Throughput", 464, 367, 79, -97))
        assert metric == {
            "name": "PM Throughput",
            "target": 464.0,
            "actual": 367.0,
            "shortfall": -97.0,
            "achievement": 79.0,
        }

    def test_name_falls_back_to_tags(self) -> None:
        assert normalise_row(make_row(parameters="", tags="INFLOW"))["name"] == "INFLOW"
        assert normalise_row(make_row(parameters=None, tags="INFLOW"))["name"] == "INFLOW"

    def test_name_empty_when_both_blank(self) -> None:
        assert normalise_row(make_row(parameters=None, tags=""))["name"] == ""

    def test_malformed_numbers_degrade_to_zero(self) -> None:
        row = make_row(monthly_target="n/a", actual_as_on_date=None, shortfall="")
        metric = normalise_row(row)
        assert metric["target"] == 0.0
        assert metric["actual"] == 0.0
        assert metric["shortfall"] == 0.0

    def test_numeric_strings_are_parsed(self) -> None:
        metric = normalise_row(make_row(monthly_target="2,142,723", percentage_ach="79%"))
        assert metric["target"] == 2142723.0
        assert metric["achievement"] == 79.0

    def test_target_mtd_is_not_a_fallback(self) -> None:
        metric = normalise_row(make_row(monthly_target=None, target_mtd=300))
        assert metric["target"] == 0.0

    def test_missing_achievement_is_nan(self) -> None:
        row = make_row()
        del row["percentage_ach"]
        assert math.isnan(normalise_row(row)["achievement"])
        assert math.isnan(normalise_row(make_row(percentage_ach=None))["achievement"])
        assert math.isnan(normalise_row(make_row(percentage_ach=float("nan")))["achievement"])

    def test_zero_achievement_is_kept(self) -> None:
        assert normalise_row(make_row(percentage_ach=0))["achievement"] == 0.0

    def test_accepts_pandas_series(self) -> None:
        metric = normalise_row(pd.Series(make_row("NPS Score", 80, 72, 90, -8)))
        assert metric["name"] == "NPS Score"
        assert metric["achievement"] == 90.0

    def test_is_repeatable(self) -> None:
        row = make_row("NPS Score", percentage_ach=None)
        first = normalise_row(row)
        second = normalise_row(row)
        assert first.keys() == second.keys()
        for key in ("name", "target", "actual", "shortfall"):
            assert first[key] == second[key]
        assert math.isnan(first["achievement"]) and math.isnan(second["achievement"])

    def test_does_not_mutate_row(self) -> None:
        row = make_row()
        before = copy.deepcopy(row)
        normalise_row(row)
        assert row == before


# ---------------------------------------------------------------------------
# build_metric_frame
# ---------------------------------------------------------------------------


class TestBuildMetricFrame:
    def test_schema_and_order(self) -> None:
        df = build_metric_frame([make_row("B"), make_row("A")])
        assert list(df.columns) == METRIC_COLUMNS
        assert df["name"].tolist() == ["B", "A"]
        assert df["target"].dtype == np.float64

    def test_empty_input(self) -> None:
        for rows in (None, []):
            df = build_metric_frame(rows)
            assert df.empty
            assert list(df.columns) == METRIC_COLUMNS

    def test_repeatable(self) -> None:
        rows = [make_row("A", percentage_ach=None), make_row("B")]
        pd.testing.assert_frame_equal(build_metric_frame(rows), build_metric_frame(rows))


# ---------------------------------------------------------------------------
# aggregate_all
# ---------------------------------------------------------------------------


class TestAggregateAll:
    def test_recomputes_not_averages(self) -> None:
        index = {
            "A": [make_row("Sales", 100, 50, 50)],
            "B": [make_row("Sales", 200, 200, 100)],
        }
        result = aggregate_all(index)
        assert len(result) == 1
        row = result.iloc[0]
        assert row["target"] == 300.0
        assert row["actual"] == 250.0
        assert row["achievement"] == pytest.approx(250 / 300 * 100)
        assert row["achievement"] != pytest.approx(75.0)
        assert row["achievement"] != pytest.approx(150.0)

    def test_throughput_scenario(self, throughput_index) -> None:
        row = aggregate_all(throughput_index).iloc[0]
        assert row["name"] == "Total Throughput"
        assert row["target"] == 764.0
        assert row["actual"] == 697.0
        assert row["shortfall"] == -67.0
        assert row["achievement"] == pytest.approx(91.2303, abs=1e-3)

    def test_zero_target_gives_zero_not_nan(self) -> None:
        index = {
            "A": [make_row("Sales", 0, 10, None)],
            "B": [make_row("Sales", 0, 20, None)],
        }
        assert aggregate_all(index).iloc[0]["achievement"] == 0.0

    def test_nan_source_achievement_still_recomputed(self) -> None:
        index = {
            "A": [make_row("Sales", 100, 80, None)],
            "B": [make_row("Sales", 100, 100, 100)],
        }
        assert aggregate_all(index).iloc[0]["achievement"] == pytest.approx(90.0)

    def test_single_occurrence_keeps_source_achievement(self) -> None:
        index = {
            "A": [make_row("Only Here", 100, 80, 77), make_row("No Ach", 100, 80, None)],
            "B": [],
        }
        result = aggregate_all(index).set_index("name")
        assert result.loc["Only Here", "achievement"] == 77.0
        assert math.isnan(result.loc["No Ach", "achievement"])

    def test_names_are_case_sensitive(self) -> None:
        index = {"A": [make_row("Sales")], "B": [make_row("SALES")]}
        assert aggregate_all(index)["name"].tolist() == ["Sales", "SALES"]

    def test_first_seen_order(self) -> None:
        index = {
            "A": [make_row("X"), make_row("Y")],
            "B": [make_row("Z"), make_row("X")],
        }
        assert aggregate_all(index)["name"].tolist() == ["X", "Y", "Z"]

    def test_explicit_location_order(self) -> None:
        index = {"A": [make_row("X")], "B": [make_row("Y")]}
        result = aggregate_all(index, locations=["B", "A", "Missing"])
        assert result["name"].tolist() == ["Y", "X"]

    def test_empty_and_missing_locations(self) -> None:
        assert aggregate_all({}).empty
        assert list(aggregate_all({}).columns) == METRIC_COLUMNS
        assert aggregate_all({"A": [], "B": None}).empty

    def test_does_not_mutate_index(self, throughput_index) -> None:
        before = copy.deepcopy(throughput_index)
        aggregate_all(throughput_index)
        assert throughput_index == before

    def test_custom_normaliser(self) -> None:
        def doubled(row):
            metric = normalise_row(row)
            metric["target"] *= 2
            return metric

        index = {"A": [make_row("Sales", 100, 50, 50)], "B": [make_row("Sales", 100, 50, 50)]}
        row = aggregate_all(index, doubled).iloc[0]
        assert row["target"] == 400.0
        assert row["achievement"] == pytest.approx(25.0)


def test_empty_metric_frame_schema() -> None:
    df = empty_metric_frame()
    assert df.empty
    assert list(df.columns) == METRIC_COLUMNS
