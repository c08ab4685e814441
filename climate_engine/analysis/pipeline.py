"""Per-variable analysis bundles: raw series text in, decision-ready statistics out."""
import logging
from datetime import date

from climate_engine.analysis.day_of_year import extract_by_day_of_year
from climate_engine.analysis.descriptive import compute_stats
from climate_engine.analysis.parser import parse_rows
from climate_engine.analysis.percentiles import compute_percentiles
from climate_engine.analysis.probability import probabilities_for
from climate_engine.analysis.projection import project_to_year
from climate_engine.analysis.regression import compute_trend
from climate_engine.models.analysis import (
    AnalysisConfig,
    BaselineBlock,
    ProjectedBlock,
    VariableAnalysis,
    VariableProjection,
)
from climate_engine.models.series import YearlyMap

logger = logging.getLogger(__name__)


def yearly_from_text(text: str, day_of_year: int, window_days: int) -> YearlyMap:
    rows = parse_rows(text)
    yearly = extract_by_day_of_year(rows, day_of_year, window_days)
    logger.debug("Parsed %d rows, %d yearly values", len(rows), len(yearly))
    return yearly


def analyze_yearly(yearly: YearlyMap, variable: str, config: AnalysisConfig) -> VariableAnalysis:
    return VariableAnalysis(
        years=yearly,
        stats=compute_stats(yearly),
        probabilities=probabilities_for(yearly, variable, config),
        trend=compute_trend(yearly),
        percentiles=compute_percentiles(yearly, config.percentiles),
    )


def analyze_series(
    text: str,
    variable: str,
    day_of_year: int,
    config: AnalysisConfig,
    window_days: int | None = None,
) -> VariableAnalysis:
    """Historical statistics of one variable around a day of year."""
    window = config.window_days if window_days is None else window_days
    yearly = yearly_from_text(text, day_of_year, window)
    return analyze_yearly(yearly, variable, config)


def project_series(
    text: str,
    variable: str,
    target_date: date,
    config: AnalysisConfig,
    window_days: int | None = None,
) -> VariableProjection:
    """Baseline statistics plus their trend-adjusted equivalent at target_date's year.

    A statistical projection of the historical trend, not a weather forecast.
    """
    window = config.window_days if window_days is None else window_days
    day_of_year = target_date.timetuple().tm_yday
    yearly = yearly_from_text(text, day_of_year, window)

    projected = project_to_year(yearly, target_date.year)

    return VariableProjection(
        baseline=BaselineBlock(
            years=yearly,
            stats=compute_stats(yearly),
            percentiles=compute_percentiles(yearly, config.percentiles),
        ),
        trend=compute_trend(yearly),
        projected=ProjectedBlock(
            target_year=target_date.year,
            years=projected,
            stats=compute_stats(projected),
            percentiles=compute_percentiles(projected, config.percentiles),
            probabilities=probabilities_for(projected, variable, config),
        ),
    )
