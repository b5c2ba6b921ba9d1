"""
BRUTE-FORCE ATTACK PREVENTION
=============================
In-memory attempt limiting for verification codes.
"""

# FLOW:
# - Check is_locked() before doing any expensive hash work.
# - record_attempt() after each counted action; lock after threshold.
# WHY:
# - A 6-digit code space is small and every check costs a PBKDF2 run.
# HOW:
# - Sliding window of attempt timestamps per key, plus a lockout deadline.

from __future__ import annotations

import threading
import time
from collections import defaultdict

from Security.security_config import get_int


class AttemptLimiter:
    def __init__(self, max_attempts: int = 5, window_seconds: int = 300, lock_seconds: int = 600):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.lock_seconds = lock_seconds
        self._attempts = defaultdict(list)
        self._locked_until = {}
        self._lock = threading.Lock()

    def _cleanup(self, key: str, now: float) -> None:
        self._attempts[key] = [t for t in self._attempts[key] if now - t <= self.window_seconds]
        if key in self._locked_until and now >= self._locked_until[key]:
            del self._locked_until[key]

    def is_locked(self, key: str) -> bool:
        with self._lock:
            now = time.time()
            self._cleanup(key, now)
            until = self._locked_until.get(key)
            return until is not None and until > now

    def record_attempt(self, key: str) -> None:
        with self._lock:
            now = time.time()
            self._attempts[key].append(now)
            self._cleanup(key, now)
            if len(self._attempts[key]) >= self.max_attempts:
                self._locked_until[key] = now + self.lock_seconds

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)
            self._locked_until.pop(key, None)


def create_attempt_limiter(prefix: str, max_attempts: int = 5, window_seconds: int = 300, lock_seconds: int = 600) -> AttemptLimiter:
    """Limiter tuned by <PREFIX>_MAX_ATTEMPTS / _WINDOW / _LOCK env vars."""
    return AttemptLimiter(
        max_attempts=get_int(f"{prefix}_MAX_ATTEMPTS", max_attempts),
        window_seconds=get_int(f"{prefix}_WINDOW", window_seconds),
        lock_seconds=get_int(f"{prefix}_LOCK", lock_seconds),
    )
