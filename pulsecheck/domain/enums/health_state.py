"""Health state enumerations."""
from enum import Enum


class HealthState(str, Enum):
    """Published health of the probed endpoint.

    Inherits from ``str`` so values serialize directly into JSON output.
    """

    LOADING = "loading"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"

    @property
    def settled(self) -> bool:
        """True for a classified (terminal) state."""
        return self is not HealthState.LOADING


class MonitorState(Enum):
    """Lifecycle state of a monitor instance."""

    DISABLED = "disabled"
    LOADING = "loading"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"

    @classmethod
    def from_health(cls, state: HealthState) -> "MonitorState":
        """Map a published health state onto the monitor state machine."""
        return cls(state.value)
