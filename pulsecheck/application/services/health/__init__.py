from .timeout_config import TimeoutConfig
from .retry_policy import RetryPolicy, RetryResult
from .probe_executor import ProbeExecutor
from .classifier import Classification, HealthClassifier
from .status_publisher import StatusPublisher
from .health_monitor import HealthMonitor

__all__ = [
    "TimeoutConfig",
    "RetryPolicy",
    "RetryResult",
    "ProbeExecutor",
    "Classification",
    "HealthClassifier",
    "StatusPublisher",
    "HealthMonitor",
]
