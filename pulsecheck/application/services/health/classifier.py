from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pulsecheck.core.logging.logger import traceable
from pulsecheck.domain.entities import ProbeOutcome
from pulsecheck.domain.enums import HealthState
from pulsecheck.domain.errors import ExhaustedRetries, HealthCheckError, ThresholdExceeded


@dataclass(frozen=True, slots=True)
class Classification:
    """Healthy/unhealthy verdict; ``failure`` explains an unhealthy one."""
    state: HealthState
    failure: Optional[HealthCheckError] = None

    @property
    def error(self) -> Optional[str]:
        return str(self.failure) if self.failure is not None else None


class HealthClassifier:
    """Maps the final outcome of a probe cycle to a health verdict."""

    @traceable
    def classify(
        self,
        outcome: ProbeOutcome,
        elapsed_ms: float,
        threshold_ms: int,
        *,
        retry_count: int = 0,
    ) -> Classification:
        if outcome.ok:
            if elapsed_ms > threshold_ms:
                return Classification(HealthState.UNHEALTHY, ThresholdExceeded(elapsed_ms, threshold_ms))
            return Classification(HealthState.HEALTHY)
        return Classification(
            HealthState.UNHEALTHY,
            ExhaustedRetries(outcome.error_message, retry_count=retry_count, raw_error=outcome.raw_error),
        )
