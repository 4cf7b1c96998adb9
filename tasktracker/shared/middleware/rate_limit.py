# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from threading import Lock

from flask import request

from tasktracker.shared.config import load_config
from tasktracker.shared.errors.base import AppError
from tasktracker.shared.errors.http import client_ip
from tasktracker.shared.logging import logger


class RateLimitedError(AppError):
    def __init__(self, retry_after: int) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retry_after": retry_after},
        )


class SlidingWindowLimiter:
    """Per-key sliding window; ``hit`` returns seconds to wait, 0 when allowed.

    Keys whose hits have all aged out are dropped once the table grows past
    ``max_keys``.
    """

    def __init__(self, limit: int, window_seconds: float, *, max_keys: int = 10_000) -> None:
        self._limit = max(1, limit)
        self._window = max(0.1, window_seconds)
        self._max_keys = max(1, max_keys)
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self._window:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]

    def hit(self, key: str, now: float | None = None) -> int:
        now = time.monotonic() if now is None else now
        with self._lock:
            if key not in self._hits and len(self._hits) >= self._max_keys:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._prune(hits, now)
            if len(hits) >= self._limit:
                return max(1, math.ceil(self._window - (now - hits[0])))
            hits.append(now)
            return 0


def rate_limit(
    limit: int | None = None,
    window_seconds: float | None = None,
    *,
    enabled: bool | None = None,
):
    """Throttle a view per endpoint and peer address (see ``client_ip``)."""
    security = load_config().security
    if enabled is None:
        enabled = security.enable_rate_limit
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not enabled:
            return view

        @wraps(view)
        def wrapper(*args, **kwargs):
            wait = limiter.hit(f"{request.endpoint}:{client_ip()}")
            if wait:
                logger.warning(f"rate limit hit on {request.endpoint}")
                raise RateLimitedError(wait)
            return view(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["RateLimitedError", "SlidingWindowLimiter", "rate_limit"]
