"""Shared fixtures: raw-row builder and small location indexes."""

from __future__ import annotations

import pytest


def make_row(
    parameters: str | None = "Metric",
    monthly_target=100,
    actual_as_on_date=50,
    percentage_ach=50,
    shortfall=-50,
    tags: str = "TAG",
    location: str = "Kalina",
    target_mtd=None,
) -> dict:
    """Canonical raw row with sensible defaults."""
    return {
        "tags": tags,
        "parameters": parameters,
        "monthly_target": monthly_target,
        "target_mtd": monthly_target if target_mtd is None else target_mtd,
        "actual_as_on_date": actual_as_on_date,
        "shortfall": shortfall,
        "percentage_ach": percentage_ach,
        "location": location,
    }


@pytest.fixture()
def row_factory():
    return make_row


@pytest.fixture()
def throughput_index() -> dict:
    """Two locations sharing one throughput metric."""
    return {
        "Kalina": [
            make_row("Total Throughput", 464, 367, 79, -97, tags="INFLOW", location="Kalina"),
        ],
        "Sewri": [
            make_row("Total Throughput", 300, 330, 110, 30, tags="INFLOW", location="Sewri"),
        ],
    }


@pytest.fixture()
def mixed_index() -> dict:
    """Two locations, one metric per category plus an unclassified one."""
    return {
        "Kalina": [
            make_row("Total Throughput", 500, 450, 90, -50, location="Kalina"),
            make_row("PM GR Labour", 1000, 1100, 110, 100, location="Kalina"),
            make_row("MGR Parts Sale", 2000, 1000, 50, -1000, location="Kalina"),
            make_row("NPS Score", 80, 80, 100, 0, location="Kalina"),
            make_row("Washing Bay Uptime", 100, 95, 95, -5, location="Kalina"),
        ],
        "Sewri": [
            make_row("Total Throughput", 500, 550, 110, 50, location="Sewri"),
            make_row("Labour per RO", 4000, 2000, 50, -2000, location="Sewri"),
        ],
    }
