from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(slots=True)
class TimeoutConfig:
    """Transport-level timeouts with env overrides.

    The monitor itself imposes no cycle timeout; these bound each request.
    """
    http_connect_timeout_ms: int = 3000
    http_read_timeout_ms: int = 10000
    http_total_timeout_ms: int = 15000

    @classmethod
    def from_env(cls) -> "TimeoutConfig":
        """Build TimeoutConfig from environment variables."""
        def _int(name: str, default: int) -> int:
            try:
                return int(os.getenv(name, str(default)))
            except ValueError:
                return default

        return cls(
            http_connect_timeout_ms=_int("HEALTH_HTTP_CONNECT_TIMEOUT_MS", 3000),
            http_read_timeout_ms=_int("HEALTH_HTTP_READ_TIMEOUT_MS", 10000),
            http_total_timeout_ms=_int("HEALTH_HTTP_TOTAL_TIMEOUT_MS", 15000),
        )

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.http_connect_timeout_ms / 1000.0,
            read=self.http_read_timeout_ms / 1000.0,
            write=self.http_read_timeout_ms / 1000.0,
            pool=self.http_total_timeout_ms / 1000.0,
        )
