"""Domain entities."""
from .request_details import RequestDetails, RequestEcho, ResponseEcho
from .probe_outcome import ProbeFailure, ProbeOutcome, ProbeSuccess
from .health_status import HealthStatus
from .health_check_config import HealthCheckConfig

__all__ = [
    'RequestDetails',
    'RequestEcho',
    'ResponseEcho',
    'ProbeFailure',
    'ProbeOutcome',
    'ProbeSuccess',
    'HealthStatus',
    'HealthCheckConfig',
]
