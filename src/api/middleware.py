"""Rate limiting (slowapi) and request logging."""

import logging
import time
from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.config import Settings, get_settings

logger = logging.getLogger("src.api.access")

# Routes are decorated with this instance at import time, so there is one
# limiter per process; ``configure_limiter`` points it at an app's settings.
limiter = Limiter(key_func=get_remote_address)

_rate_limit: Optional[str] = None


def configure_limiter(settings: Settings) -> Limiter:
    global _rate_limit
    _rate_limit = settings.rate_limit
    limiter.enabled = settings.rate_limit_enabled
    return limiter


def default_rate_limit() -> str:
    return _rate_limit or get_settings().rate_limit


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.debug(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response
