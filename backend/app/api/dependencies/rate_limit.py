from slowapi import Limiter
from slowapi.util import get_remote_address
from app.core.config import settings

limiter = Limiter(key_func=get_remote_address)

# recompute endpoints hit the activity tables directly
RECOMPUTE_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
