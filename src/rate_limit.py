"""
Простой rate limiter: скользящее окно временных меток на ключ (IP клиента).
"""

import threading
import time
from typing import Callable, Dict, List


class RateLimiter:
    def __init__(
        self,
        max_requests: int = 3,
        window: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Сколько ключей сейчас отслеживается"""
        with self._lock:
            return len(self._hits)

    def is_limited(self, key: str) -> bool:
        """True — лимит исчерпан; иначе запрос засчитывается"""
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window:
                self._sweep(now)

            hits = [t for t in self._hits.get(key, ()) if now - t < self.window]
            if len(hits) >= self.max_requests:
                self._hits[key] = hits
                return True
            hits.append(now)
            self._hits[key] = hits
            return False

    def _sweep(self, now: float):
        """Удалить ключи без запросов в текущем окне (вызывать под блокировкой)"""
        idle = [key for key, hits in self._hits.items() if now - hits[-1] >= self.window]
        for key in idle:
            del self._hits[key]
        self._last_sweep = now

    def reset(self):
        with self._lock:
            self._hits.clear()
