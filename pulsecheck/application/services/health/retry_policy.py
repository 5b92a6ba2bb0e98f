from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from pulsecheck.core.logging.logger import StructuredLogger
from pulsecheck.domain.entities import HealthCheckConfig

T = TypeVar("T")

RetryPredicate = Callable[[Any], bool]
Supplier = Callable[[], Awaitable[T]]


@dataclass(slots=True)
class RetryResult(Generic[T]):
    """Final value of a retry loop and the number of retries it consumed."""
    value: T
    retries: int


@dataclass(slots=True)
class RetryPolicy:
    """Fixed-delay retry policy.

    ``max_attempts`` counts retries after the first attempt, so a policy
    with ``max_attempts=3`` makes at most four calls. The delay is the same
    before every retry: no exponential growth, no jitter.
    """
    max_attempts: int
    delay_ms: int

    @classmethod
    def from_config(cls, config: HealthCheckConfig) -> "RetryPolicy":
        return cls(max_attempts=config.retry_attempts, delay_ms=config.retry_delay_ms)

    def should_retry(self, attempt_index: int, max_attempts: Optional[int] = None) -> bool:
        """True while ``attempt_index`` (retries already made) is below the limit."""
        limit = self.max_attempts if max_attempts is None else max_attempts
        return attempt_index < limit

    def delay(self) -> int:
        """Milliseconds to wait before the next retry."""
        return self.delay_ms

    async def wait(self) -> None:
        await asyncio.sleep(self.delay() / 1000.0)

    async def run(
        self,
        supplier: Supplier[T],
        *,
        is_retryable: RetryPredicate,
        logger: StructuredLogger,
        context: dict[str, Any] | None = None,
    ) -> RetryResult[T]:
        """Call ``supplier`` until its result is not retryable or retries run out.

        The supplier is expected to report failures through its return
        value; exceptions it raises propagate unchanged.
        """
        retries = 0
        logger.debug(lambda: "retry-start", extra={"attempt": 1})
        while True:
            result = await supplier()
            if not is_retryable(result):
                return RetryResult(value=result, retries=retries)
            if not self.should_retry(retries):
                logger.warning(
                    lambda: "retry-exhausted",
                    extra={"retries": retries, "error": _describe(result), **(context or {})},
                )
                return RetryResult(value=result, retries=retries)
            retries += 1
            logger.warning(
                lambda: f"retry-attempt {retries}/{self.max_attempts} in {self.delay()}ms",
                extra={"attempt": retries + 1, "error": _describe(result), **(context or {})},
            )
            await self.wait()


def _describe(result: Any) -> Optional[str]:
    return getattr(result, "error_message", None)
