from climate_engine.analysis.regression import compute_trend
from climate_engine.models.series import YearlyMap


def project_to_year(yearly: YearlyMap, target_year: int) -> YearlyMap:
    """Shift every historical value along the linear trend to target_year.

    Keys stay the historical years so the result can go through the same
    stats/percentile/probability functions as a baseline map. Without a
    trend (fewer than three years) the baseline is returned unchanged.
    """
    if not yearly:
        return {}

    slope = compute_trend(yearly).slope
    if slope is None:
        return dict(yearly)

    return {
        year: round(value + slope * (target_year - year), 4)
        for year, value in yearly.items()
    }
