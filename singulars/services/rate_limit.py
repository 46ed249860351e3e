import math
import threading
import time
from collections import deque


class SlidingWindowRateLimiter:
    def __init__(self, max_requests=30, window_seconds=60.0, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, key):
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._expire(hits, now)
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def retry_after(self, key):
        now = self._clock()
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0
            self._expire(hits, now)
            if len(hits) < self.max_requests:
                return 0
            return max(1, math.ceil(hits[0] + self.window_seconds - now))

    def reset(self):
        with self._lock:
            self._hits.clear()

    def _expire(self, hits, now):
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now):
        for key in list(self._hits):
            hits = self._hits[key]
            self._expire(hits, now)
            if not hits:
                del self._hits[key]
        self._last_sweep = now
