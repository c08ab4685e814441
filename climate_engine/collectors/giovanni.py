"""NASA Giovanni time-series client.

Fetches an area-averaged time series for a single point (degenerate bbox) as
CSV. Failures are logged and reported as None; retries happen in the session.
"""
import logging
import time

import requests
from retry_requests import retry

from climate_engine.collectors.base import SeriesSource
from climate_engine.config import settings

logger = logging.getLogger(__name__)


def build_session(retries: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    return retry(requests.Session(), retries=retries, backoff_factor=backoff_factor)


class GiovanniSource(SeriesSource):
    name = "giovanni"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        data_map: dict[str, str] | None = None,
        session: requests.Session | None = None,
    ):
        self.token = settings.giovanni_token if token is None else token
        self.base_url = base_url or settings.giovanni_url
        self.timeout = timeout or settings.giovanni_timeout
        self.data_map = settings.data_map if data_map is None else data_map
        self.session = session or build_session()

    def build_params(self, variable: str, lat: float, lon: float, start_year: int, end_year: int) -> dict:
        return {
            "service": "TimeSeries",
            "variable": self.data_map.get(variable, variable),
            "starttime": f"{start_year}-01-01T00:00:00Z",
            "endtime": f"{end_year}-12-31T23:59:59Z",
            "bbox": f"{lon},{lat},{lon},{lat}",
            "format": "CSV",
        }

    def fetch_series(self, variable: str, lat: float, lon: float, start_year: int, end_year: int) -> str | None:
        params = self.build_params(variable, lat, lon, start_year, end_year)
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        t0 = time.monotonic()
        try:
            resp = self.session.get(self.base_url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Giovanni %s request failed: %s", variable, e)
            return None

        elapsed = (time.monotonic() - t0) * 1000
        if not resp.ok:
            logger.error("Giovanni %s failed: status=%d (%.0fms) body=%s",
                         variable, resp.status_code, elapsed, resp.text[:500])
            return None

        logger.info("Giovanni %s (%.4f, %.4f) %d-%d: %d bytes in %.0fms",
                    variable, lat, lon, start_year, end_year, len(resp.content), elapsed)
        return resp.text
