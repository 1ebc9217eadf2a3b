from __future__ import annotations
import time
from typing import Callable, Dict, List, Protocol


def _now_ms() -> int:
    return int(time.time() * 1000)


class Limiter(Protocol):
    def admit(self, identifier: str, max_requests: int, window_ms: int) -> bool: ...


class RateLimiter:
    """
    In-memory sliding-window limiter.

    Keeps the admitted-request timestamps (ms) per identifier and drops the ones
    that left the window on each call. Rejected attempts are not recorded.
    Identifiers themselves are never evicted, so the map grows with the number
    of distinct keys seen by the process.

    `admit` never awaits: under asyncio the check and the append happen without
    another request interleaving.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._windows: Dict[str, List[int]] = {}

    def admit(self, identifier: str, max_requests: int = 10, window_ms: int = 60000) -> bool:
        now = self._clock()
        valid = [t for t in self._windows.get(identifier, []) if now - t < window_ms]

        if len(valid) >= max_requests:
            return False

        valid.append(now)
        self._windows[identifier] = valid
        return True

    def window(self, identifier: str) -> List[int]:
        return list(self._windows.get(identifier, []))

    def __len__(self) -> int:
        return len(self._windows)


# Process-wide limiter shared by every request
limiter = RateLimiter()
