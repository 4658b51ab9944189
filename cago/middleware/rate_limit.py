"""
Shared slowapi limiter for the generation routes.

Keyed by client address. Every generation route makes one paid model call,
so these carry the tighter GENERATION_RATE_LIMIT.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from cago.config import get_settings

settings = get_settings()

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

GENERATION_LIMIT = settings.generation_rate_limit
