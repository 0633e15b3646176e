"""
Fixed-window rate limiting for the PHIVOLCS API endpoints.

Each (client, endpoint) pair gets one counter and one reset instant per
window. Windows are fixed, not sliding: a burst straddling a window edge
is not smoothed. Expired records are removed by a background sweep so
one-shot clients do not accumulate in the store.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from log_config import setup_logger
from ratelimit.store import InMemoryRateLimitStore, RateLimitRecord, RateLimitStore

UNKNOWN_CLIENT = "unknown"
DEFAULT_SWEEP_INTERVAL = 10 * 60  # seconds


@dataclass(frozen=True)
class RateLimitConfig:
    """Quota for one endpoint.

    Attributes:
        window_ms: Window length in milliseconds
        max_requests: Requests admitted per client per window
    """

    window_ms: int
    max_requests: int


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check.

    Attributes:
        success: Whether the request is admitted
        limit: The configured max_requests
        remaining: Requests left in the current window
        reset: Epoch milliseconds at which the window ends
    """

    success: bool
    limit: int
    remaining: int
    reset: int


def current_time_ms() -> int:
    return int(time.time() * 1000)


def get_rate_limit_key(client_id: str, endpoint: str) -> str:
    return f"{client_id}:{endpoint}"


def get_client_identifier(headers: Mapping[str, str]) -> str:
    """
    Resolve the client identity used for rate limiting.

    Prefers the first address in X-Forwarded-For, then X-Real-IP. Clients
    sending neither share the "unknown" bucket.

    Args:
        headers: Request headers (case-insensitive mapping, e.g. Flask's)

    Returns:
        str: Client identifier
    """
    forwarded_for = headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT


class RateLimiter:
    """Process-scoped fixed-window limiter owning its store and sweep thread."""

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], int] = current_time_ms,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
    ):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.clock = clock
        self.sweep_interval = sweep_interval
        self.logger = setup_logger("rate_limiter")

        self._stop_event = threading.Event()
        self._sweep_thread = None

    def check_rate_limit(
        self, client_id: str, endpoint: str, config: RateLimitConfig
    ) -> RateLimitResult:
        """
        Admit or reject one request for client_id on endpoint.

        A missing or expired record starts a new window. Rejections do not
        increment the counter, so the reset instant stays unchanged.

        Args:
            client_id (str): Identifier from get_client_identifier
            endpoint (str): Endpoint path the quota applies to
            config (RateLimitConfig): Window length and quota

        Returns:
            RateLimitResult: success flag, limit, remaining and reset
        """
        key = get_rate_limit_key(client_id, endpoint)
        now = self.clock()

        record = self.store.get(key)
        if record is None or now > record.reset_time:
            record = RateLimitRecord(count=0, reset_time=now + config.window_ms)
            self.store.set(key, record)

        if record.count >= config.max_requests:
            self.logger.warning(
                f"Rate limit exceeded for {key} ({record.count}/{config.max_requests})"
            )
            return RateLimitResult(
                success=False,
                limit=config.max_requests,
                remaining=0,
                reset=record.reset_time,
            )

        record.count += 1
        self.store.set(key, record)

        return RateLimitResult(
            success=True,
            limit=config.max_requests,
            remaining=config.max_requests - record.count,
            reset=record.reset_time,
        )

    def sweep(self, now: Optional[int] = None) -> int:
        """
        Delete every record whose window has already ended.

        Args:
            now (int): Epoch milliseconds, defaults to the limiter clock

        Returns:
            int: Number of records removed
        """
        if now is None:
            now = self.clock()

        removed = 0
        for key in self.store.keys():
            record = self.store.get(key)
            if record is not None and now > record.reset_time:
                self.store.delete(key)
                removed += 1

        if removed:
            self.logger.debug(f"Swept {removed} expired rate limit records")
        return removed

    def _sweep_loop(self):
        while not self._stop_event.wait(self.sweep_interval):
            self.sweep()

    def start(self):
        """Start the periodic sweep thread (no-op if interval is not positive)."""
        if self.sweep_interval <= 0 or self.is_running:
            return

        self._stop_event.clear()
        self._sweep_thread = threading.Thread(
            target=self._sweep_loop, name="rate-limit-sweeper", daemon=True
        )
        self._sweep_thread.start()
        self.logger.info(
            f"Rate limit sweeper started (every {self.sweep_interval} seconds)"
        )

    def stop(self):
        """Stop the sweep thread and wait for it to exit."""
        if self._sweep_thread is None:
            return

        self._stop_event.set()
        self._sweep_thread.join()
        self._sweep_thread = None
        self.logger.info("Rate limit sweeper stopped")

    @property
    def is_running(self) -> bool:
        return self._sweep_thread is not None and self._sweep_thread.is_alive()
