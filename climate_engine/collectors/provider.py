import logging
import time
from concurrent.futures import ThreadPoolExecutor

from climate_engine.collectors.base import SeriesSource
from climate_engine.collectors.cache import NullCache, SeriesCache, cache_key

logger = logging.getLogger(__name__)


class SeriesProvider:
    """A series source fronted by a cache. Only non-empty fetches are cached."""

    max_workers: int = 4

    def __init__(self, source: SeriesSource, cache: SeriesCache | None = None):
        self.source = source
        self.cache = cache if cache is not None else NullCache()

    def fetch(self, variable: str, lat: float, lon: float, start_year: int, end_year: int) -> str | None:
        key = cache_key(variable, lat, lon, start_year, end_year)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            return cached

        text = self.source.fetch_series(variable, lat, lon, start_year, end_year)
        if text:
            self.cache.set(key, text)
        return text or None

    def fetch_many(
        self, variables: list[str], lat: float, lon: float, start_year: int, end_year: int,
    ) -> dict[str, str | None]:
        """Fetch several variables in parallel; result keeps the input order."""
        unique = list(dict.fromkeys(variables))
        if not unique:
            return {}

        t0 = time.monotonic()
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(unique))) as executor:
            futures = {
                var: executor.submit(self.fetch, var, lat, lon, start_year, end_year)
                for var in unique
            }
            out = {var: futures[var].result() for var in unique}

        elapsed = time.monotonic() - t0
        logger.info("Source %s: %d variables in %.1fs", self.source.name, len(unique), elapsed)
        return out
