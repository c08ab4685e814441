from datetime import date

from pydantic import BaseModel

# One representative value per calendar year
YearlyMap = dict[int, float]


class Observation(BaseModel):
    model_config = {"frozen": True}

    date: date
    value: float | None = None
