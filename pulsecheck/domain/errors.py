"""Error taxonomy for health probing.

Only ``ConfigurationError`` ever escapes the monitor. The others describe
why a probe cycle ended unhealthy and are delivered to observers as values.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .entities.request_details import RequestEcho, ResponseEcho


class HealthCheckError(Exception):
    """Base class for every health-check error."""


class ConfigurationError(HealthCheckError):
    """Invalid monitor configuration; lists every problem found."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems: List[str] = list(problems)
        super().__init__("invalid health check configuration: " + "; ".join(self.problems))


class TransportFailure(HealthCheckError):
    """A single request attempt failed at the network or HTTP level.

    ``response`` holds the partial response when the server answered with
    an error status; it is ``None`` when nothing came back at all.
    """

    def __init__(
        self,
        message: str,
        *,
        response: Optional[ResponseEcho] = None,
        request: Optional[RequestEcho] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request


def _format_ms(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


class ThresholdExceeded(HealthCheckError):
    """The endpoint answered 200 but slower than the configured threshold."""

    def __init__(self, elapsed_ms: float, threshold_ms: int) -> None:
        super().__init__(f"Response time ({_format_ms(elapsed_ms)}ms) exceeded threshold ({threshold_ms}ms)")
        self.elapsed_ms = elapsed_ms
        self.threshold_ms = threshold_ms


class ExhaustedRetries(HealthCheckError):
    """Every attempt of a probe cycle failed.

    The message is the final attempt's error message so it can be shown
    to users as is.
    """

    def __init__(self, message: str, *, retry_count: int, raw_error: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.retry_count = retry_count
        self.raw_error = raw_error
