import time
import asyncio
import logging
from typing import Dict
from collections import defaultdict, deque
from fastapi import HTTPException, Request, status
from hrms.core.config import settings
from hrms.core.request_context import get_client_ip

logger = logging.getLogger(__name__)

class InMemoryRateLimiter:
    """Sliding-window limiter keyed by an arbitrary string, per process"""

    def __init__(self, max_attempts: int = 100, window_seconds: int = 300):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._requests: Dict[str, deque] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = 60

    def _prune(self, timestamps: deque, cutoff_time: float):
        while timestamps and timestamps[0] <= cutoff_time:
            timestamps.popleft()

    def _cleanup_old_entries(self, current_time: float):
        if current_time - self._last_cleanup < self._cleanup_interval:
            return

        cutoff_time = current_time - self.window_seconds
        stale = []
        for key, timestamps in self._requests.items():
            self._prune(timestamps, cutoff_time)
            if not timestamps:
                stale.append(key)
        for key in stale:
            del self._requests[key]

        self._last_cleanup = current_time
        if stale:
            logger.debug(f"Cleaned up {len(stale)} rate limit entries")

    async def check_rate_limit(self, key: str) -> bool:
        """Record one attempt; False once the window is full"""
        async with self._lock:
            current_time = time.time()
            timestamps = self._requests[key]
            self._prune(timestamps, current_time - self.window_seconds)

            if len(timestamps) >= self.max_attempts:
                logger.warning(f"Rate limit exceeded for key: {key}")
                return False

            timestamps.append(current_time)
            self._cleanup_old_entries(current_time)
            return True

    async def seconds_until_reset(self, key: str) -> int:
        async with self._lock:
            timestamps = self._requests.get(key)
            if not timestamps:
                return 0
            return max(int(timestamps[0] + self.window_seconds - time.time()), 0)

    def reset(self):
        self._requests.clear()

login_rate_limiter = InMemoryRateLimiter(
    max_attempts=settings.LOGIN_MAX_ATTEMPTS,
    window_seconds=settings.LOGIN_WINDOW_SECONDS
)

async def check_login_rate_limit(request: Request):
    """Dependency guarding the login endpoint"""
    key = f"rate_limit:{request.url.path}:{get_client_ip(request)}"

    if not await login_rate_limiter.check_rate_limit(key):
        wait = await login_rate_limiter.seconds_until_reset(key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many login attempts. Please try again in {wait} seconds."
        )
