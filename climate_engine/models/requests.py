from datetime import date, datetime, timezone

from pydantic import BaseModel, Field, field_validator


class QueryRequest(BaseModel):
    lat: float
    lon: float
    day_of_year: int = Field(ge=1, le=366)
    start_year: int | None = None
    end_year: int | None = None
    variables: list[str] = Field(min_length=1)
    window_days: int | None = Field(default=None, ge=0, le=15)


class ForecastRequest(BaseModel):
    lat: float
    lon: float
    date: date
    variables: list[str] = Field(min_length=1)
    window_days: int | None = Field(default=None, ge=0, le=15)
    start_year: int | None = None
    end_year: int | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _utc_calendar_date(cls, value):
        """Accept plain dates or ISO datetimes; aware datetimes are taken in UTC."""
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
            except ValueError:
                return value
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date()
        return value
