# app/core/security.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import Settings, settings

# slowapi decorators bind to one Limiter per process, so the most recently
# configured app's rate limit settings apply process-wide
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
_auth_limit = settings.AUTH_RATE_LIMIT


def configure_limiter(app_settings: Settings):
    global _auth_limit
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    _auth_limit = app_settings.AUTH_RATE_LIMIT
    limiter.reset()


def auth_rate_limit() -> str:
    return _auth_limit
