import logging
import math
from collections.abc import Iterable

from climate_engine.models.series import Observation, YearlyMap

logger = logging.getLogger(__name__)

MAX_WINDOW_DAYS = 15


def is_present(value: float | None) -> bool:
    """A reading is present unless it is missing or NaN; zero is a valid reading."""
    return value is not None and not math.isnan(value)


def extract_by_day_of_year(rows: Iterable[Observation], day_of_year: int, window: int = 3) -> YearlyMap:
    """Pick one value per year within +/- window days of the target day of year.

    Selection is first-match in source order: once a year has a value, later
    candidates for that year are ignored even if closer to the target day.
    There is no wraparound across the year boundary.
    """
    if not 1 <= day_of_year <= 366:
        raise ValueError(f"day_of_year must be in 1..366, got {day_of_year}")
    if not 0 <= window <= MAX_WINDOW_DAYS:
        raise ValueError(f"window must be in 0..{MAX_WINDOW_DAYS}, got {window}")

    result: YearlyMap = {}
    for row in rows:
        if not is_present(row.value):
            continue

        year = row.date.year
        if year in result:
            continue

        doy = row.date.timetuple().tm_yday
        if abs(doy - day_of_year) <= window:
            result[year] = row.value

    logger.debug("Day %d +/- %d: %d years matched", day_of_year, window, len(result))
    return result
