"""Daily request quotas keyed by client identifier."""

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from kcalcal.domain.rate_limit import RateLimitRecord, RateLimitResult

DAY_MS = 24 * 60 * 60 * 1000
DEFAULT_DAILY_LIMIT = 10
UNKNOWN_CLIENT = "unknown"

# Checked in order; the first present header wins.
_CLIENT_ADDRESS_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")

_logger = logging.getLogger(__name__)


class RateLimitStore(Protocol):
    """Storage interface for quota counters."""

    def get(self, identifier: str) -> RateLimitRecord | None:
        """Return the counter for an identifier, if any."""

    def set(self, identifier: str, record: RateLimitRecord) -> None:
        """Replace the counter for an identifier."""

    def delete(self, identifier: str) -> None:
        """Drop the counter for an identifier."""

    def items(self) -> Iterable[tuple[str, RateLimitRecord]]:
        """Return all stored counters."""


@dataclass
class InMemoryRateLimitStore(RateLimitStore):
    """Process-local quota table; every worker holds its own."""

    _records: dict[str, RateLimitRecord]

    def __init__(self) -> None:
        self._records = {}

    def get(self, identifier: str) -> RateLimitRecord | None:
        return self._records.get(identifier)

    def set(self, identifier: str, record: RateLimitRecord) -> None:
        self._records[identifier] = record

    def delete(self, identifier: str) -> None:
        self._records.pop(identifier, None)

    def items(self) -> Iterable[tuple[str, RateLimitRecord]]:
        return list(self._records.items())


def now_ms() -> int:
    """Return the current epoch time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class RateLimiter:
    """Fixed 24h window counter per identifier."""

    store: RateLimitStore
    default_limit: int = DEFAULT_DAILY_LIMIT
    window_ms: int = DAY_MS
    clock: Callable[[], int] = field(default=now_ms)

    def check(self, identifier: str, limit: int | None = None) -> RateLimitResult:
        """Count one request against the identifier's quota."""
        resolved_limit = self.default_limit if limit is None else limit
        now = self.clock()
        record = self.store.get(identifier)
        if record is None or now > record.reset_at:
            record = RateLimitRecord(count=0, reset_at=now + self.window_ms)
            self.store.set(identifier, record)

        if record.count >= resolved_limit:
            _logger.info("Rate limit exceeded: identifier=%s", identifier)
            return RateLimitResult(
                success=False,
                limit=resolved_limit,
                remaining=0,
                reset_at=record.reset_at,
            )

        record.count += 1
        self.store.set(identifier, record)
        return RateLimitResult(
            success=True,
            limit=resolved_limit,
            remaining=resolved_limit - record.count,
            reset_at=record.reset_at,
        )

    def sweep(self) -> int:
        """Remove expired counters and return how many were dropped."""
        now = self.clock()
        expired = [
            identifier
            for identifier, record in self.store.items()
            if now > record.reset_at
        ]
        for identifier in expired:
            self.store.delete(identifier)
        return len(expired)


def resolve_client_identifier(
    device_id: str | None, headers: Mapping[str, str]
) -> str:
    """Pick the quota key: device id, then forwarded address, then a sentinel."""
    if device_id and device_id.strip():
        return device_id.strip()
    for name in _CLIENT_ADDRESS_HEADERS:
        value = headers.get(name)
        if not value:
            continue
        if name == "x-forwarded-for":
            first_hop = value.split(",")[0].strip()
            if first_hop:
                return first_hop
            continue
        return value.strip()
    return UNKNOWN_CLIENT
