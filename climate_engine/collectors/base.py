from abc import ABC, abstractmethod


class NoSeriesError(LookupError):
    """No raw series could be obtained for a variable."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"No data for variable {variable}")


class SeriesSource(ABC):
    """Supplies raw delimited time-series text for one point and variable."""

    name: str = "base"

    @abstractmethod
    def fetch_series(self, variable: str, lat: float, lon: float, start_year: int, end_year: int) -> str | None:
        """Return the raw series text, or None when nothing could be fetched."""
        ...
