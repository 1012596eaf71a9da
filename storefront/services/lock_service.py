# storefront/services/lock_service.py
import redis
from redis.lock import Lock

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class LockService:
    """
    -session lock on cart:<session>:lock, expires after ttl
    -wait_seconds=None fails at once when held, otherwise waits up to wait_seconds
    -release only by the owner token (redis-py Lock, lua compare and delete)
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    def acquire_session_lock(self, session_id: str, ttl: int, wait_seconds: float | None = None) -> Lock | None:
        key = f"cart:{session_id}:lock"
        logger.debug(f"Acquire lock {key}")
        lock = self.redis.lock(
            key,
            timeout=ttl,
            blocking=wait_seconds is not None,
            blocking_timeout=wait_seconds,
        )
        if lock.acquire():
            return lock
        return None

    def release_session_lock(self, lock: Lock) -> None:
        logger.debug(f"Release lock {lock.name}")
        lock.release()
