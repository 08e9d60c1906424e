"""인메모리 TTL 캐시 (시세/히스토리 행 캐시)"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """
    키 단위 만료 캐시

    - 만료된 항목은 조회 시점에 제거 (별도 eviction 정책 없음)
    - clock 주입으로 테스트에서 시간 제어
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._data: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                logger.debug("Cache miss: %s", key)
                return None
            if self._clock() >= entry.expires_at:
                logger.debug("Cache expired: %s", key)
                del self._data[key]
                return None
            logger.debug("Cache hit: %s", key)
            return entry.value

    def put(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._data[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
        logger.debug("Cache set: %s (TTL=%ss)", key, ttl)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
