"""Dependency providers for the API. Tests swap these via app.dependency_overrides."""
import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from climate_engine.collectors.base import SeriesSource
from climate_engine.collectors.cache import DuckDBCache, MemoryCache, NullCache, SeriesCache
from climate_engine.collectors.giovanni import GiovanniSource
from climate_engine.collectors.provider import SeriesProvider
from climate_engine.collectors.synthetic import SyntheticSource
from climate_engine.config import Settings, settings
from climate_engine.models.analysis import AnalysisConfig
from climate_engine.resilience.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return settings


def get_analysis_config(s: Settings = Depends(get_settings)) -> AnalysisConfig:
    return AnalysisConfig.from_settings(s)


def build_source(s: Settings) -> SeriesSource:
    if s.data_source == "giovanni":
        return GiovanniSource(
            token=s.giovanni_token,
            base_url=s.giovanni_url,
            timeout=s.giovanni_timeout,
            data_map=s.data_map,
        )
    if s.data_source == "synthetic":
        return SyntheticSource(seed=s.synthetic_seed)
    raise ValueError(f"Unknown data source '{s.data_source}'")


def build_cache(s: Settings) -> SeriesCache:
    if s.cache_backend == "memory":
        return MemoryCache(s.cache_ttl_seconds)
    if s.cache_backend == "duckdb":
        from climate_engine.db import get_db
        return DuckDBCache(get_db(), s.cache_ttl_seconds)
    if s.cache_backend == "none":
        return NullCache()
    raise ValueError(f"Unknown cache backend '{s.cache_backend}'")


@lru_cache(maxsize=1)
def get_provider() -> SeriesProvider:
    provider = SeriesProvider(build_source(settings), build_cache(settings))
    logger.info("Series provider: source=%s cache=%s", provider.source.name, settings.cache_backend)
    return provider


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    return RateLimiter(settings.rate_limit_per_minute, window_seconds=60.0)


def rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    client = request.client.host if request.client else "unknown"
    retry_after = limiter.check(client)
    if retry_after is not None:
        raise HTTPException(
            status_code=429,
            detail="Too many requests",
            headers={"Retry-After": str(max(1, int(retry_after + 0.999)))},
        )
