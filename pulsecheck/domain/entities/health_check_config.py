"""Monitor configuration entity."""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from ..errors import ConfigurationError

HealthyCallback = Callable[[Any], None]
UnhealthyCallback = Callable[[BaseException], None]

DEFAULT_INTERVAL_MS = 30_000
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 5_000
DEFAULT_RESPONSE_TIME_THRESHOLD_MS = 1_000


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class HealthCheckConfig:
    """Immutable configuration of one monitor.

    Durations are in milliseconds. The observer callbacks are part of the
    configuration surface but do not take part in equality.
    """

    url: str
    interval_ms: int = DEFAULT_INTERVAL_MS
    enabled: bool = True
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    response_time_threshold_ms: int = DEFAULT_RESPONSE_TIME_THRESHOLD_MS
    on_healthy: Optional[HealthyCallback] = field(default=None, compare=False, repr=False)
    on_unhealthy: Optional[UnhealthyCallback] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_env(cls, url: Optional[str] = None) -> "HealthCheckConfig":
        """Build config from environment variables."""
        def _int(name: str, default: int) -> int:
            try:
                return int(os.getenv(name, str(default)))
            except ValueError:
                return default

        return cls(
            url=url if url is not None else os.getenv("HEALTH_URL", ""),
            interval_ms=_int("HEALTH_INTERVAL_MS", DEFAULT_INTERVAL_MS),
            enabled=os.getenv("HEALTH_ENABLED", "true").strip().lower() != "false",
            retry_attempts=_int("HEALTH_RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS),
            retry_delay_ms=_int("HEALTH_RETRY_DELAY_MS", DEFAULT_RETRY_DELAY_MS),
            response_time_threshold_ms=_int("HEALTH_RESPONSE_TIME_THRESHOLD_MS", DEFAULT_RESPONSE_TIME_THRESHOLD_MS),
        )

    def problems(self) -> List[str]:
        """Return every validation problem, empty when the config is valid."""
        found: List[str] = []
        if not isinstance(self.url, str) or not self.url.strip():
            found.append("url must be a non-empty string")
        if not _is_number(self.interval_ms) or self.interval_ms <= 0:
            found.append(f"interval_ms must be > 0 (got {self.interval_ms!r})")
        if not isinstance(self.retry_attempts, int) or isinstance(self.retry_attempts, bool) or self.retry_attempts < 0:
            found.append(f"retry_attempts must be an integer >= 0 (got {self.retry_attempts!r})")
        if not _is_number(self.retry_delay_ms) or self.retry_delay_ms < 0:
            found.append(f"retry_delay_ms must be >= 0 (got {self.retry_delay_ms!r})")
        if not _is_number(self.response_time_threshold_ms) or self.response_time_threshold_ms <= 0:
            found.append(f"response_time_threshold_ms must be > 0 (got {self.response_time_threshold_ms!r})")
        return found

    def validate(self) -> "HealthCheckConfig":
        """Raise ConfigurationError if the config is invalid; return self otherwise."""
        found = self.problems()
        if found:
            raise ConfigurationError(found)
        return self

    def evolve(self, **changes: Any) -> "HealthCheckConfig":
        """Return a copy with ``changes`` applied. The copy is not validated."""
        return dataclasses.replace(self, **changes)
