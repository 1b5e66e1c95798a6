"""이름 기반 단일 슬롯 read-through 캐시입니다.

조회수 상위 공지 목록처럼 파라미터 없는 조회 결과를 이름 하나로 보관합니다.
계산 함수는 락 밖에서 실행되므로 동시에 비어 있는 슬롯을 읽은 요청들이 같은 값을
중복 계산할 수 있으며, 결과가 멱등하므로 허용합니다. 계산 도중 무효화된 결과는
저장하지 않습니다.
"""

import logging
import threading
from typing import Callable, Dict, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOP_NOTICES_CACHE = "topNotices"


class NamedCache:
    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, tuple] = {}
        # 무효화 시점 이전에 시작된 계산 결과가 저장되지 않도록 세대를 센다.
        self._generations: Dict[str, int] = {}
        self._epoch = 0

    def _generation(self, key: str) -> tuple:
        return self._epoch, self._generations.get(key, 0)

    def get_or_compute(self, key: str, compute_fn: Callable[[], Sequence[T]]) -> List[T]:
        with self._lock:
            cached = self._entries.get(key)
            generation = self._generation(key)
        if cached is not None:
            return list(cached)

        value = tuple(compute_fn())
        with self._lock:
            if self._generation(key) == generation:
                self._entries[key] = value
                logger.debug("cache '%s' populated with %d item(s)", key, len(value))
            else:
                logger.debug("cache '%s' invalidated during compute, result not stored", key)
        return list(value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries


notice_cache = NamedCache()
