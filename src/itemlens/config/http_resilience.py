"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retry settings.

    A fetch cycle never retries on its own: a failed source stays degraded for
    the rest of the cycle. Only connection failures can be retried, by the
    httpx transport, and the default is zero.
    """

    connect_retries: int = 0

    def __post_init__(self) -> None:
        if self.connect_retries < 0:
            raise ConfigurationError("connect_retries must be non-negative")


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
