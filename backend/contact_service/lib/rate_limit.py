"""
Fixed-window rate limiting for the contact form.

Each client gets ``max_requests`` submissions per window. The first request
(or the first one after the window has passed) opens a fresh window with a
count of 1; rejected requests do not extend or increment it.

Storage is pluggable: ``InMemoryRateLimitStore`` is process-local and is lost
on restart, ``RedisRateLimitStore`` shares the table between instances.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Protocol

from contact_service.core.cache import cache_get_json, cache_set_json
from contact_service.core.settings import settings

log = logging.getLogger("uvicorn.error")

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float  # epoch seconds


class RateLimitStore(Protocol):
    def get(self, client_id: str) -> Optional[RateLimitRecord]: ...

    def set(self, client_id: str, record: RateLimitRecord) -> None: ...


class InMemoryRateLimitStore:
    def __init__(self, max_clients: int = 10000, clock: Callable[[], float] = time.time):
        self._records: Dict[str, RateLimitRecord] = {}
        self._max_clients = max_clients
        self._clock = clock

    def __len__(self) -> int:
        return len(self._records)

    def get(self, client_id: str) -> Optional[RateLimitRecord]:
        return self._records.get(client_id)

    def set(self, client_id: str, record: RateLimitRecord) -> None:
        if client_id not in self._records and len(self._records) >= self._max_clients:
            self.prune_expired()
        self._records[client_id] = record

    def prune_expired(self) -> int:
        now = self._clock()
        expired = [cid for cid, rec in self._records.items() if now > rec.reset_time]
        for cid in expired:
            del self._records[cid]
        if expired:
            log.info(f"[rate_limit] pruned {len(expired)} expired records")
        return len(expired)


class RedisRateLimitStore:
    def __init__(self, prefix: str = "ratelimit:contact", clock: Callable[[], float] = time.time):
        self._prefix = prefix
        self._clock = clock

    def _key(self, client_id: str) -> str:
        return f"{self._prefix}:{client_id}"

    def get(self, client_id: str) -> Optional[RateLimitRecord]:
        raw = cache_get_json(self._key(client_id))
        if not isinstance(raw, dict):
            return None
        try:
            return RateLimitRecord(count=int(raw["count"]), reset_time=float(raw["reset_time"]))
        except (KeyError, TypeError, ValueError):
            log.warning(f"[rate_limit] discarding malformed record for {client_id}")
            return None

    def set(self, client_id: str, record: RateLimitRecord) -> None:
        ttl = record.reset_time - self._clock()
        cache_set_json(
            self._key(client_id),
            {"count": record.count, "reset_time": record.reset_time},
            ttl_seconds=int(ttl) + 1,
        )


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def admit(self, client_id: str) -> bool:
        with self._lock:
            now = self._clock()
            record = self.store.get(client_id)

            if record is None or now > record.reset_time:
                self.store.set(client_id, RateLimitRecord(count=1, reset_time=now + self.window_seconds))
                return True

            if record.count >= self.max_requests:
                return False

            record.count += 1
            self.store.set(client_id, record)
            return True

    def retry_after(self, client_id: str) -> int:
        """Whole seconds until the client's current window closes."""
        record = self.store.get(client_id)
        if record is None:
            return 0
        return max(0, int(record.reset_time - self._clock() + 0.999))


def get_client_id(headers: Mapping[str, str]) -> str:
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or UNKNOWN_CLIENT


def build_rate_limiter() -> RateLimiter:
    if settings.rate_limit_backend.lower() == "redis":
        store: RateLimitStore = RedisRateLimitStore()
    else:
        store = InMemoryRateLimitStore(max_clients=settings.rate_limit_max_clients)
    return RateLimiter(
        store,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )


_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = build_rate_limiter()
    return _limiter
