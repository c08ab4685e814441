from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from climate_engine.api.deps import get_settings, rate_limit
from climate_engine.api.security import require_api_key
from climate_engine.config import Settings

router = APIRouter(prefix="/v1", tags=["meta"], dependencies=[Depends(rate_limit)])


@router.get("/health")
def health(s: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data_source": s.data_source,
    }


@router.get("/variables", dependencies=[Depends(require_api_key)])
def variables(s: Settings = Depends(get_settings)):
    """Friendly variable names and the dataset ids they map to."""
    return {"data_map": s.data_map}


@router.get("/thresholds", dependencies=[Depends(require_api_key)])
def thresholds(s: Settings = Depends(get_settings)):
    """Configured exceedance thresholds per variable."""
    return {"thresholds": s.thresholds}
