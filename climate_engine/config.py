from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "CLIMATE_", "env_file": ".env", "extra": "ignore"}

    engine_host: str = "0.0.0.0"
    engine_port: int = 8322
    db_path: str = str(Path.home() / ".climate-engine" / "cache.duckdb")
    log_dir: str = str(Path.home() / ".climate-engine" / "logs")

    # Raw series source: "giovanni" (live NASA) or "synthetic" (offline)
    data_source: str = "synthetic"
    synthetic_seed: int = 0

    # NASA Giovanni
    giovanni_url: str = "https://giovanni.gsfc.nasa.gov/giovanni/giovanni-service/giovanni"
    giovanni_token: str = ""
    giovanni_timeout: int = 30

    # Friendly variable name -> Giovanni dataset id
    data_map: dict[str, str] = {
        "precipitation": "GPM_3IMERGHH_06_precipitationCal",
        "air_temperature": "NOAA_NCEP_T2m",
        "windspeed": "ERA5_hourly_wind_speed",
    }

    # Exceedance thresholds: variable -> label -> limit (value >= limit counts)
    thresholds: dict[str, dict[str, float]] = {
        "air_temperature": {
            "very_hot_c": 32.2,  # 90°F
            "very_cold_c": 0.0,
            "very_uncomfortable_c": 32.0,
        },
        "precipitation": {
            "very_wet_mm": 10.0,  # mm/day
        },
        "windspeed": {
            "very_windy_ms": 10.0,  # ~22 mph
        },
    }

    # Analysis defaults, overridable per request
    default_start_year: int = 1995
    default_end_year: int | None = None  # None = last full calendar year
    default_window_days: int = 3

    # Raw series cache: "memory", "duckdb" or "none"
    cache_backend: str = "memory"
    cache_ttl_seconds: int = 21600  # 6h

    # Access control
    api_key: str = ""
    rate_limit_per_minute: int = 60


settings = Settings()
