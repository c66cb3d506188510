import logging
import math
import time
from typing import Dict

from fastapi import Depends, HTTPException, Request, status
from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from cms.core.config import Settings

logger = logging.getLogger(__name__)

LOGIN_SCOPE = "login"
WRITE_SCOPE = "write"


class RateLimiter:
    """Ограничение частоты запросов по IP клиента, счетчики в памяти процесса"""

    def __init__(self, settings: Settings):
        self.enabled = settings.rate_limit_enabled
        self.trust_forwarded_for = settings.trust_forwarded_for
        self.limits: Dict[str, RateLimitItem] = {
            LOGIN_SCOPE: parse(settings.login_rate_limit),
            WRITE_SCOPE: parse(settings.write_rate_limit),
        }
        self._limiter = MovingWindowRateLimiter(MemoryStorage())

    def client_id(self, request: Request) -> str:
        if self.trust_forwarded_for:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def check(self, scope: str, request: Request) -> None:
        """Учет запроса; 429 с Retry-After, если лимит исчерпан"""
        if not self.enabled:
            return

        item = self.limits[scope]
        client = self.client_id(request)
        if self._limiter.hit(item, scope, client):
            return

        reset_at, _ = self._limiter.get_window_stats(item, scope, client)
        retry_after = max(1, math.ceil(reset_at - time.time()))
        logger.warning(f"Rate limit {item} exceeded for {scope} from {client}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(retry_after)},
        )


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def login_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Лимит попыток входа"""
    limiter.check(LOGIN_SCOPE, request)


def write_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Лимит запросов администратора"""
    limiter.check(WRITE_SCOPE, request)
