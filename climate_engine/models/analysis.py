from datetime import date

from pydantic import BaseModel, Field

from climate_engine.config import Settings


def _last_full_year() -> int:
    return date.today().year - 1


class StatsSummary(BaseModel):
    count: int
    mean: float | None = None
    median: float | None = None
    std: float | None = None


class TrendResult(BaseModel):
    slope: float | None = None  # units per year
    intercept: float | None = None
    r2: float | None = None
    n: int


class AnalysisConfig(BaseModel):
    """Static inputs of the pipeline, passed explicitly at call time."""

    thresholds: dict[str, dict[str, float]] = Field(default_factory=dict)
    start_year: int = 1995
    end_year: int = Field(default_factory=_last_full_year)
    window_days: int = Field(default=3, ge=0, le=15)
    percentiles: list[float] = Field(default_factory=lambda: [50, 75, 90, 95])

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisConfig":
        kwargs = {
            "thresholds": settings.thresholds,
            "start_year": settings.default_start_year,
            "window_days": settings.default_window_days,
        }
        if settings.default_end_year is not None:
            kwargs["end_year"] = settings.default_end_year
        return cls(**kwargs)

    def thresholds_for(self, variable: str) -> dict[str, float]:
        return self.thresholds.get(variable, {})

    def resolve_period(self, start_year: int | None, end_year: int | None) -> tuple[int, int]:
        start = self.start_year if start_year is None else start_year
        end = self.end_year if end_year is None else end_year
        if start > end:
            raise ValueError(f"start_year {start} is after end_year {end}")
        return start, end


class VariableAnalysis(BaseModel):
    years: dict[int, float]
    stats: StatsSummary
    probabilities: dict[str, float]
    trend: TrendResult
    percentiles: dict[str, float]


class BaselineBlock(BaseModel):
    years: dict[int, float]
    stats: StatsSummary
    percentiles: dict[str, float]


class ProjectedBlock(BaseModel):
    target_year: int
    years: dict[int, float]
    stats: StatsSummary
    percentiles: dict[str, float]
    probabilities: dict[str, float]


class VariableProjection(BaseModel):
    baseline: BaselineBlock
    trend: TrendResult
    projected: ProjectedBlock
