"""Application services root exports."""
from .health import HealthClassifier, HealthMonitor, ProbeExecutor, RetryPolicy, StatusPublisher, TimeoutConfig

__all__ = [
    "HealthClassifier",
    "HealthMonitor",
    "ProbeExecutor",
    "RetryPolicy",
    "StatusPublisher",
    "TimeoutConfig",
]
