import numpy as np

from climate_engine.models.analysis import StatsSummary
from climate_engine.models.series import YearlyMap


def compute_stats(yearly: YearlyMap) -> StatsSummary:
    """Count, mean, upper median and population std of the yearly values."""
    if not yearly:
        return StatsSummary(count=0)

    values = np.sort(np.array(list(yearly.values()), dtype=float))
    count = len(values)

    # Upper median: element at count // 2, no averaging for even counts
    return StatsSummary(
        count=count,
        mean=round(float(np.mean(values)), 2),
        median=round(float(values[count // 2]), 2),
        std=round(float(np.std(values, ddof=0)), 2),
    )
