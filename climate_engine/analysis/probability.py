"""Threshold exceedance probabilities over yearly samples."""
from collections.abc import Mapping

import numpy as np

from climate_engine.models.analysis import AnalysisConfig
from climate_engine.models.series import YearlyMap


def compute_probabilities(yearly: YearlyMap, thresholds: Mapping[str, float]) -> dict[str, float]:
    """Percentage of years whose value meets or exceeds each labelled limit."""
    if not yearly or not thresholds:
        return {}

    values = np.array(list(yearly.values()), dtype=float)
    count = len(values)

    return {
        label: round(100 * int(np.count_nonzero(values >= limit)) / count, 1)
        for label, limit in thresholds.items()
    }


def probabilities_for(yearly: YearlyMap, variable: str, config: AnalysisConfig) -> dict[str, float]:
    return compute_probabilities(yearly, config.thresholds_for(variable))
