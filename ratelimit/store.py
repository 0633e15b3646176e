"""
Storage for fixed-window rate limit records.

The limiter only needs get/set/delete by key plus a way to enumerate keys
for the expiry sweep, so any backend offering those can be injected.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class RateLimitRecord:
    """Request count for one client/endpoint window.

    Attributes:
        count: Requests admitted in the current window
        reset_time: Epoch milliseconds at which the window ends
    """

    count: int
    reset_time: int


class RateLimitStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[RateLimitRecord]:
        """Return the record stored under key, or None."""

    @abstractmethod
    def set(self, key: str, record: RateLimitRecord) -> None:
        """Create or replace the record stored under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Snapshot of the stored keys."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store backed by a dict. Starts empty."""

    def __init__(self):
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[RateLimitRecord]:
        with self._lock:
            return self._records.get(key)

    def set(self, key: str, record: RateLimitRecord) -> None:
        with self._lock:
            self._records[key] = record

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
