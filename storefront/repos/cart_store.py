# storefront/repos/cart_store.py
import json
import threading
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import ConflictError, StorageError
from storefront.domain.schemas import CartLine
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CART_BUSY = "Cart is being updated by another request"


class CartStore(ABC):
    """Per-session cart storage keyed by the session id."""

    @abstractmethod
    def load(self, session_id: str) -> List[CartLine]: ...

    @abstractmethod
    def save(self, session_id: str, lines: List[CartLine]) -> None: ...

    @abstractmethod
    def clear(self, session_id: str) -> None: ...

    @abstractmethod
    def lock(self, session_id: str, wait: bool = True):
        """
        Context manager holding the session lock.
        wait=True waits up to the store's lock wait time, wait=False fails at once.
        Raises ConflictError when the lock could not be taken.
        """


class _SessionLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class MemoryCartStore(CartStore):
    def __init__(self, ttl_seconds: int, lock_wait_seconds: float = 5.0, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.lock_wait_seconds = lock_wait_seconds
        self._clock = clock
        self._carts: Dict[str, Tuple[float, List[CartLine]]] = {}
        self._locks: Dict[str, _SessionLock] = {}
        self._guard = threading.Lock()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [sid for sid, (touched, _) in self._carts.items() if now - touched > self.ttl_seconds]
        for sid in expired:
            logger.info(f"Cart for session {sid[:8]} expired")
            del self._carts[sid]

    def load(self, session_id: str) -> List[CartLine]:
        with self._guard:
            self._purge_expired()
            entry = self._carts.get(session_id)
            if not entry:
                return []
            return [line.model_copy() for line in entry[1]]

    def save(self, session_id: str, lines: List[CartLine]) -> None:
        with self._guard:
            self._carts[session_id] = (self._clock(), [line.model_copy() for line in lines])

    def clear(self, session_id: str) -> None:
        with self._guard:
            self._carts.pop(session_id, None)

    @contextmanager
    def lock(self, session_id: str, wait: bool = True) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _SessionLock()
            entry.users += 1

        try:
            if wait:
                acquired = entry.lock.acquire(timeout=self.lock_wait_seconds)
            else:
                acquired = entry.lock.acquire(blocking=False)
            if not acquired:
                raise ConflictError(CART_BUSY)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            #entry lives only while someone holds or waits on it
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[session_id]


class RedisCartStore(CartStore):
    """Cart as a JSON list under cart:<session>, expiring with the session."""

    def __init__(
        self,
        client: redis.Redis,
        ttl_seconds: int,
        lock_ttl_seconds: int = 30,
        lock_wait_seconds: float = 5.0,
    ):
        self.redis = client
        self.ttl_seconds = ttl_seconds
        self.lock_ttl_seconds = lock_ttl_seconds
        self.lock_wait_seconds = lock_wait_seconds
        self.lock_service = LockService(client)

    @classmethod
    def from_url(
        cls,
        url: str,
        ttl_seconds: int,
        lock_ttl_seconds: int = 30,
        lock_wait_seconds: float = 5.0,
    ) -> "RedisCartStore":
        client = redis.Redis.from_url(url, decode_responses=True)
        return cls(client, ttl_seconds, lock_ttl_seconds, lock_wait_seconds)

    @staticmethod
    def _key(session_id: str) -> str:
        return f"cart:{session_id}"

    def load(self, session_id: str) -> List[CartLine]:
        try:
            raw = self.redis.get(self._key(session_id))
        except RedisError as e:
            raise StorageError("Cart storage unavailable") from e
        if not raw:
            return []
        return [CartLine.model_validate(item) for item in json.loads(raw)]

    def save(self, session_id: str, lines: List[CartLine]) -> None:
        payload = json.dumps([line.model_dump(mode="json", by_alias=True) for line in lines])
        try:
            self.redis.set(self._key(session_id), payload, ex=self.ttl_seconds)
        except RedisError as e:
            raise StorageError("Cart storage unavailable") from e

    def clear(self, session_id: str) -> None:
        try:
            self.redis.delete(self._key(session_id))
        except RedisError as e:
            raise StorageError("Cart storage unavailable") from e

    @contextmanager
    def lock(self, session_id: str, wait: bool = True) -> Iterator[None]:
        try:
            session_lock = self.lock_service.acquire_session_lock(
                session_id,
                ttl=self.lock_ttl_seconds,
                wait_seconds=self.lock_wait_seconds if wait else None,
            )
        except RedisError as e:
            raise StorageError("Cart storage unavailable") from e
        if not session_lock:
            raise ConflictError(CART_BUSY)
        try:
            yield
        finally:
            try:
                self.lock_service.release_session_lock(session_lock)
            except RedisError as e:
                # the lock expires on its own after lock_ttl_seconds
                logger.warning(f"Failed to release cart lock for session {session_id[:8]}: {e}")
