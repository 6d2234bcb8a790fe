"""
In-process login throttling.

Failed login attempts are remembered per ``np|ip`` key in a sliding window.
State lives in the worker process; with several workers each one keeps its
own counters.
"""

import math
import time
from typing import Callable, Dict, List, Optional

from label_tracker.core.config import get_settings


class LoginThrottle:
    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: Dict[str, List[float]] = {}

    @staticmethod
    def key_for(np: str, client_ip: Optional[str]) -> str:
        return f"{(np or '').strip().lower()}|{client_ip or 'unknown'}"

    def _recent(self, key: str) -> List[float]:
        window_start = self._clock() - self.window_seconds
        recent = [ts for ts in self._attempts.get(key, []) if ts > window_start]
        if recent:
            self._attempts[key] = recent
        else:
            self._attempts.pop(key, None)
        return recent

    def too_many_attempts(self, key: str) -> bool:
        return len(self._recent(key)) >= self.max_attempts

    def available_in(self, key: str) -> int:
        """Seconds until the oldest failure in the window expires."""
        recent = self._recent(key)
        if len(recent) < self.max_attempts:
            return 0
        return max(1, math.ceil(recent[0] + self.window_seconds - self._clock()))

    def hit(self, key: str) -> None:
        self._recent(key)
        self._attempts.setdefault(key, []).append(self._clock())

    def clear(self, key: str) -> None:
        self._attempts.pop(key, None)

    def reset(self) -> None:
        self._attempts.clear()


_login_throttle: Optional[LoginThrottle] = None


def get_login_throttle() -> LoginThrottle:
    """Process-wide throttle configured from settings on first use."""
    global _login_throttle
    if _login_throttle is None:
        settings = get_settings()
        _login_throttle = LoginThrottle(
            max_attempts=settings.login_max_attempts,
            window_seconds=settings.login_lockout_seconds,
        )
    return _login_throttle
