"""Limitador de peticiones por ventana fija, en memoria y por cliente."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from app.core.config import get_settings


@dataclass
class _Window:
    started_at: float
    count: int = 0


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int  # segundos hasta que se abre la siguiente ventana


class FixedWindowRateLimiter:
    """Permite `max_requests` por cliente cada `window_seconds`."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            retry_after = max(1, math.ceil(window.started_at + self.window_seconds - now))
            return RateLimitDecision(
                allowed=window.count <= self.max_requests,
                remaining=max(0, self.max_requests - window.count),
                retry_after=retry_after,
            )

    def _sweep(self, now: float) -> None:
        """Quita las ventanas caducadas; se llama con el lock tomado."""
        expired = [k for k, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = self._clock()


_settings = get_settings()
rate_limiter = FixedWindowRateLimiter(
    max_requests=_settings.rate_limit_max_requests,
    window_seconds=_settings.rate_limit_window_seconds,
)
