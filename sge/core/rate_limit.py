# sge/core/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from sge.core.config import settings

# Aplicado apenas em login/registro (ver api/endpoints/auth.py)
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
