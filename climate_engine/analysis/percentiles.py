import math
from collections.abc import Sequence

from climate_engine.models.series import YearlyMap

DEFAULT_PERCENTILES = (50, 75, 90, 95)


def percentile_label(p: float) -> str:
    """Result key of a percentile: 50 and 50.0 give "50", 97.5 gives "97.5"."""
    p = float(p)
    return str(int(p)) if p.is_integer() else str(p)


def compute_percentiles(yearly: YearlyMap, percentiles: Sequence[float] = DEFAULT_PERCENTILES) -> dict[str, float]:
    """Nearest-rank percentiles: the value at rank ceil(p/100 * n), no interpolation."""
    values = sorted(yearly.values())
    if not values:
        return {}

    n = len(values)
    out = {}
    for p in percentiles:
        rank = min(max(1, math.ceil(p / 100 * n)), n)
        out[percentile_label(p)] = round(values[rank - 1], 2)
    return out
