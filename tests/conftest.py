"""Shared fixtures: an injected analysis config and a small deterministic series."""

from __future__ import annotations

import os
import tempfile

# Keep test runs from writing logs into the user's home directory
os.environ.setdefault("CLIMATE_LOG_DIR", tempfile.mkdtemp(prefix="climate-engine-logs-"))

import pytest

from climate_engine.collectors.base import SeriesSource
from climate_engine.models.analysis import AnalysisConfig

THRESHOLDS = {
    "air_temperature": {"very_hot_c": 32.2, "very_cold_c": 0.0},
    "precipitation": {"very_wet_mm": 10.0},
}


def linear_series_csv(variable: str = "air_temperature", start: int = 1995, end: int = 2004) -> str:
    """One reading per year on July 19th, rising by exactly 1 per year from 30."""
    lines = ["# synthetic test series", f"time,{variable}"]
    for i, year in enumerate(range(start, end + 1)):
        lines.append(f"{year}-07-19,{30 + i}")
    return "\n".join(lines) + "\n"


class StaticSource(SeriesSource):
    """Serves fixed texts per variable and counts calls."""

    name = "static"

    def __init__(self, texts: dict[str, str]):
        self.texts = texts
        self.calls: list[tuple] = []

    def fetch_series(self, variable, lat, lon, start_year, end_year):
        self.calls.append((variable, lat, lon, start_year, end_year))
        return self.texts.get(variable)


@pytest.fixture
def config() -> AnalysisConfig:
    return AnalysisConfig(thresholds=THRESHOLDS, start_year=1995, end_year=2004, window_days=3)


@pytest.fixture
def linear_csv() -> str:
    return linear_series_csv()
