import numpy as np

from climate_engine.models.analysis import TrendResult
from climate_engine.models.series import YearlyMap

MIN_TREND_POINTS = 3
_DEGENERATE_DEN = 1e-9


def compute_trend(yearly: YearlyMap) -> TrendResult:
    """Ordinary least-squares trend of value against year.

    Returns slope (units/year), intercept and r2. Fewer than three points is
    not an error: every field but n is None.
    """
    n = len(yearly)
    if n < MIN_TREND_POINTS:
        return TrendResult(n=n)

    years = sorted(yearly)
    x = np.array(years, dtype=float)
    y = np.array([yearly[yr] for yr in years], dtype=float)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_xx = float(np.sum(x * x))

    den = n * sum_xx - sum_x * sum_x
    if abs(den) < _DEGENERATE_DEN:
        return TrendResult(slope=0.0, intercept=float(y[0]), r2=0.0, n=n)

    slope = (n * sum_xy - sum_x * sum_y) / den
    intercept = (sum_y - slope * sum_x) / n

    predicted = slope * x + intercept
    ss_res = float(np.sum((y - predicted) ** 2))
    ss_tot = float(np.sum((y - sum_y / n) ** 2))
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0

    return TrendResult(
        slope=round(slope, 5),
        intercept=round(intercept, 5),
        r2=round(r_squared, 4),
        n=n,
    )
