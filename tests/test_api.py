"""API tests with an injected provider, settings and rate limiter."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from climate_engine.analysis.export import read_csv_export
from climate_engine.api.deps import get_provider, get_rate_limiter, get_settings
from climate_engine.collectors.cache import MemoryCache
from climate_engine.collectors.provider import SeriesProvider
from climate_engine.config import Settings
from climate_engine.main import app
from climate_engine.models.analysis import AnalysisConfig
from climate_engine.resilience.rate_limit import RateLimiter

from conftest import THRESHOLDS, StaticSource, linear_series_csv


def _settings(**overrides) -> Settings:
    values = {
        "thresholds": THRESHOLDS,
        "default_start_year": 1995,
        "default_end_year": 2004,
        "default_window_days": 3,
        "api_key": "",
        "data_source": "synthetic",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def source() -> StaticSource:
    return StaticSource({"air_temperature": linear_series_csv()})


@pytest.fixture
def make_client(source):
    def _make(settings: Settings | None = None, limiter: RateLimiter | None = None) -> TestClient:
        provider = SeriesProvider(source, MemoryCache(60))
        app.dependency_overrides[get_settings] = lambda: settings or _settings()
        app.dependency_overrides[get_provider] = lambda: provider
        app.dependency_overrides[get_rate_limiter] = lambda: limiter or RateLimiter(0)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


QUERY = {"lat": 40.0, "lon": -3.7, "day_of_year": 200, "variables": ["air_temperature"]}


# ---------------------------------------------------------------------------
# /v1/query


def test_query(make_client, source) -> None:
    resp = make_client().post("/v1/query", json=QUERY)
    assert resp.status_code == 200

    body = resp.json()
    assert body["location"] == {"lat": 40.0, "lon": -3.7}
    assert body["period"] == {"start": 1995, "end": 2004}
    assert body["day_of_year"] == 200

    result = body["results"]["air_temperature"]
    assert result["years"]["1995"] == 30.0
    assert result["stats"] == {"count": 10, "mean": 34.5, "median": 35.0, "std": 2.87}
    assert result["probabilities"] == {"very_hot_c": 70.0, "very_cold_c": 100.0}
    assert result["trend"] == {"slope": 1.0, "intercept": -1965.0, "r2": 1.0, "n": 10}
    assert result["percentiles"]["50"] == 34.0
    assert source.calls == [("air_temperature", 40.0, -3.7, 1995, 2004)]


def test_query_explicit_period_and_window(make_client, source) -> None:
    resp = make_client().post("/v1/query", json={**QUERY, "start_year": 1990, "end_year": 2010, "window_days": 0})
    assert resp.status_code == 200
    assert resp.json()["period"] == {"start": 1990, "end": 2010}
    assert resp.json()["results"]["air_temperature"]["stats"]["count"] == 7
    assert source.calls[-1][3:] == (1990, 2010)


def test_query_unknown_variable_is_404(make_client) -> None:
    resp = make_client().post("/v1/query", json={**QUERY, "variables": ["air_temperature", "snow"]})
    assert resp.status_code == 404
    assert resp.json() == {"error": "No data for variable snow"}


def test_query_inverted_period_is_400(make_client) -> None:
    resp = make_client().post("/v1/query", json={**QUERY, "start_year": 2010, "end_year": 2000})
    assert resp.status_code == 400
    assert "start_year" in resp.json()["error"]


@pytest.mark.parametrize("patch", [
    {"day_of_year": 0},
    {"day_of_year": 367},
    {"window_days": 16},
    {"variables": []},
])
def test_query_validation(make_client, patch) -> None:
    resp = make_client().post("/v1/query", json={**QUERY, **patch})
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /v1/forecast


def test_forecast(make_client) -> None:
    resp = make_client().post("/v1/forecast", json={
        "lat": 40.0, "lon": -3.7, "date": "2030-07-19", "variables": ["air_temperature"],
    })
    assert resp.status_code == 200

    body = resp.json()
    assert body["date"] == "2030-07-19"
    assert body["day_of_year"] == 200
    assert body["baseline_period"] == {"start": 1995, "end": 2004}
    assert "not a deterministic weather forecast" in body["notes"]

    result = body["results"]["air_temperature"]
    assert result["baseline"]["stats"]["count"] == 10
    assert result["trend"]["slope"] == 1.0
    assert result["projected"]["target_year"] == 2030
    assert result["projected"]["stats"] == {"count": 10, "mean": 65.0, "median": 65.0, "std": 0.0}
    assert result["projected"]["probabilities"] == {"very_hot_c": 100.0, "very_cold_c": 100.0}
    assert set(result["projected"]["years"]) == set(result["baseline"]["years"])


@pytest.mark.parametrize("stamp, expected, doy", [
    ("2030-07-19T12:00:00Z", "2030-07-19", 200),
    ("2030-07-19T00:00:00", "2030-07-19", 200),
    ("2030-07-19T23:30:00-05:00", "2030-07-20", 201),
])
def test_forecast_accepts_datetimes(make_client, stamp, expected, doy) -> None:
    resp = make_client().post("/v1/forecast", json={
        "lat": 40.0, "lon": -3.7, "date": stamp, "variables": ["air_temperature"],
    })
    assert resp.status_code == 200
    assert resp.json()["date"] == expected
    assert resp.json()["day_of_year"] == doy


def test_forecast_rejects_garbage_date(make_client) -> None:
    resp = make_client().post("/v1/forecast", json={
        "lat": 40.0, "lon": -3.7, "date": "next tuesday", "variables": ["air_temperature"],
    })
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /v1/download


def test_download_csv(make_client) -> None:
    resp = make_client().get("/v1/download", params={
        "lat": 40.0, "lon": -3.7, "day_of_year": 200, "variables": "air_temperature",
    })
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="climate_stats.csv"' in resp.headers["content-disposition"]

    recovered = read_csv_export(resp.text)
    assert recovered == {"air_temperature": {1995 + i: 30.0 + i for i in range(10)}}


def test_download_defaults_to_precipitation(make_client) -> None:
    resp = make_client().get("/v1/download", params={"lat": 0, "lon": 0, "day_of_year": 10})
    assert resp.status_code == 404
    assert resp.json() == {"error": "No data for variable precipitation"}


# ---------------------------------------------------------------------------
# Metadata, auth, throttling


def test_metadata_endpoints(make_client) -> None:
    client = make_client()
    assert client.get("/v1/thresholds").json() == {"thresholds": THRESHOLDS}
    assert "precipitation" in client.get("/v1/variables").json()["data_map"]
    health = client.get("/v1/health").json()
    assert health["status"] == "ok"
    assert health["data_source"] == "synthetic"


def test_api_key_required_when_configured(make_client) -> None:
    client = make_client(settings=_settings(api_key="s3cret"))

    resp = client.post("/v1/query", json=QUERY)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}

    assert client.post("/v1/query", json=QUERY, headers={"X-API-Key": "wrong"}).status_code == 401
    assert client.post("/v1/query", json=QUERY, headers={"X-API-Key": "s3cret"}).status_code == 200
    assert client.post("/v1/query", json=QUERY, params={"api_key": "s3cret"}).status_code == 200
    assert client.get("/v1/thresholds").status_code == 401
    assert client.get("/v1/health").status_code == 200


def test_rate_limit(make_client) -> None:
    client = make_client(limiter=RateLimiter(2))

    assert client.get("/v1/health").status_code == 200
    assert client.get("/v1/health").status_code == 200
    resp = client.get("/v1/health")
    assert resp.status_code == 429
    assert int(resp.headers["retry-after"]) >= 1


# ---------------------------------------------------------------------------
# Settings -> analysis config


def test_analysis_config_from_settings() -> None:
    config = AnalysisConfig.from_settings(_settings(default_window_days=5))
    assert config.thresholds == THRESHOLDS
    assert (config.start_year, config.end_year, config.window_days) == (1995, 2004, 5)

    open_ended = AnalysisConfig.from_settings(_settings(default_end_year=None))
    assert open_ended.end_year == date.today().year - 1
