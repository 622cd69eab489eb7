from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

# Shared rate limiter; routers decorate endpoints with limiter.limit(...)
limiter = Limiter(key_func=get_remote_address)

__all__ = ["limiter", "settings"]
