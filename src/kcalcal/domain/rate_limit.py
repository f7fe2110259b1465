"""Domain models for request quotas."""

from dataclasses import dataclass


@dataclass
class RateLimitRecord:
    """Usage counter for one client identifier."""

    count: int
    reset_at: int


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a quota check."""

    success: bool
    limit: int
    remaining: int
    reset_at: int

    def headers(self) -> dict[str, str]:
        """Return the X-RateLimit headers for this result."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
