import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from climate_engine.analysis.export import build_csv_export
from climate_engine.analysis.pipeline import analyze_series, project_series
from climate_engine.api.deps import get_analysis_config, get_provider, rate_limit
from climate_engine.api.security import require_api_key
from climate_engine.collectors.base import NoSeriesError
from climate_engine.collectors.provider import SeriesProvider
from climate_engine.models.analysis import AnalysisConfig
from climate_engine.models.requests import ForecastRequest, QueryRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v1",
    tags=["climate"],
    dependencies=[Depends(rate_limit), Depends(require_api_key)],
)

PROJECTION_NOTES = "Seasonal projection from historical DOY using linear trend; not a deterministic weather forecast."


def _fetch_all(
    provider: SeriesProvider, variables: list[str], lat: float, lon: float, start: int, end: int,
) -> dict[str, str]:
    raw = provider.fetch_many(variables, lat, lon, start, end)
    for var in variables:
        if not raw.get(var):
            raise NoSeriesError(var)
    return raw


@router.post("/query")
def query(
    body: QueryRequest,
    config: AnalysisConfig = Depends(get_analysis_config),
    provider: SeriesProvider = Depends(get_provider),
):
    """Historical per-year sample, stats, exceedance probabilities, trend and percentiles."""
    start, end = config.resolve_period(body.start_year, body.end_year)
    raw = _fetch_all(provider, body.variables, body.lat, body.lon, start, end)

    results = {
        var: analyze_series(raw[var], var, body.day_of_year, config, body.window_days).model_dump()
        for var in raw
    }

    return {
        "location": {"lat": body.lat, "lon": body.lon},
        "period": {"start": start, "end": end},
        "day_of_year": body.day_of_year,
        "results": results,
    }


@router.post("/forecast")
def forecast(
    body: ForecastRequest,
    config: AnalysisConfig = Depends(get_analysis_config),
    provider: SeriesProvider = Depends(get_provider),
):
    """Baseline statistics for the date's day of year, projected to the date's year."""
    start, end = config.resolve_period(body.start_year, body.end_year)
    raw = _fetch_all(provider, body.variables, body.lat, body.lon, start, end)

    results = {
        var: project_series(raw[var], var, body.date, config, body.window_days).model_dump()
        for var in raw
    }

    return {
        "location": {"lat": body.lat, "lon": body.lon},
        "baseline_period": {"start": start, "end": end},
        "date": body.date.isoformat(),
        "day_of_year": body.date.timetuple().tm_yday,
        "results": results,
        "notes": PROJECTION_NOTES,
    }


@router.get("/download")
def download_csv(
    lat: float = Query(...),
    lon: float = Query(...),
    day_of_year: int = Query(..., ge=1, le=366),
    start_year: int | None = Query(None),
    end_year: int | None = Query(None),
    variables: str = Query("precipitation", description="Comma-separated variable names"),
    window_days: int | None = Query(None, ge=0, le=15),
    config: AnalysisConfig = Depends(get_analysis_config),
    provider: SeriesProvider = Depends(get_provider),
):
    """CSV export: one row per variable and year."""
    names = [v.strip() for v in variables.split(",") if v.strip()]
    if not names:
        raise ValueError("variables must name at least one variable")

    start, end = config.resolve_period(start_year, end_year)
    raw = _fetch_all(provider, names, lat, lon, start, end)

    results = {var: analyze_series(raw[var], var, day_of_year, config, window_days) for var in raw}
    logger.info("CSV export: %d variables, %d rows",
                len(results), sum(len(r.years) for r in results.values()))

    return Response(
        content=build_csv_export(results),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="climate_stats.csv"'},
    )
