# app/services/lock_service.py
import threading
import uuid
from typing import Protocol

import redis

from app.utils.logging import get_logger
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, SWEEP_GUARD_BACKEND, SWEEP_GUARD_TTL_SECONDS

logger = get_logger(__name__)

# worker and admin API build their guards under this name so they share a lock
CART_CLEANUP_GUARD = "cart-cleanup"

# compare-and-delete in one atomic step, so a guard never deletes a lock
# that expired and was taken over by another worker
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class SweepGuard(Protocol):
    """Skip-if-busy mutual exclusion for a periodic sweep."""

    def try_acquire(self) -> bool: ...

    def release(self) -> None: ...


class InProcessSweepGuard:
    """Guards overlapping runs inside one worker process."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        if self._lock.locked():
            self._lock.release()

    @property
    def running(self) -> bool:
        return self._lock.locked()


class RedisSweepGuard:
    """
    Same contract backed by a redis key, for several workers running the
    same beat schedule. The ttl frees the key if a worker dies mid-sweep.
    """

    def __init__(
        self,
        name: str,
        client: redis.Redis | None = None,
        ttl: int = SWEEP_GUARD_TTL_SECONDS,
    ):
        self.key = f"sweep:{name}:lock"
        self.ttl = ttl
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self._token: str | None = None

    @redis_retry()
    def try_acquire(self) -> bool:
        token = uuid.uuid4().hex
        acquired = self.redis.set(name=self.key, value=token, nx=True, ex=self.ttl)
        if not acquired:
            return False
        self._token = token
        return True

    @redis_retry()
    def release(self) -> None:
        if self._token is None:
            return
        released = self.redis.eval(_RELEASE_LUA, 1, self.key, self._token)
        if not released:
            logger.warning(f"Lock {self.key} was already gone on release")
        self._token = None


def build_sweep_guard(name: str, backend: str | None = None) -> SweepGuard:
    backend = (backend or SWEEP_GUARD_BACKEND).lower()
    if backend == "redis":
        return RedisSweepGuard(name)
    if backend == "memory":
        return InProcessSweepGuard(name)
    raise ValueError(f"Unknown sweep guard backend: {backend}")
