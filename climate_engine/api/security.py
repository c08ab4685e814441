import hmac
import logging

from fastapi import Depends, Header, Query

from climate_engine.api.deps import get_settings
from climate_engine.config import Settings

logger = logging.getLogger(__name__)


class Unauthorized(Exception):
    pass


def require_api_key(
    x_api_key: str | None = Header(None),
    api_key: str | None = Query(None),
    s: Settings = Depends(get_settings),
) -> None:
    """Enforce the configured API key (header X-API-Key or query api_key). No key configured = open."""
    if not s.api_key:
        return
    provided = x_api_key if x_api_key is not None else api_key
    if provided is None or not hmac.compare_digest(s.api_key.encode(), provided.encode()):
        raise Unauthorized()
