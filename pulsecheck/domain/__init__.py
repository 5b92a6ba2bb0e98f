"""Domain layer - Health entities, enums, errors and interfaces."""
from .entities import (
    HealthCheckConfig,
    HealthStatus,
    ProbeFailure,
    ProbeOutcome,
    ProbeSuccess,
    RequestDetails,
    RequestEcho,
    ResponseEcho,
)
from .enums import HealthState, MonitorState
from .errors import (
    ConfigurationError,
    ExhaustedRetries,
    HealthCheckError,
    ThresholdExceeded,
    TransportFailure,
)
from .interfaces import ITransport, TransportResponse

__all__ = [
    # Entities
    'HealthCheckConfig',
    'HealthStatus',
    'ProbeFailure',
    'ProbeOutcome',
    'ProbeSuccess',
    'RequestDetails',
    'RequestEcho',
    'ResponseEcho',
    # Enums
    'HealthState',
    'MonitorState',
    # Errors
    'ConfigurationError',
    'ExhaustedRetries',
    'HealthCheckError',
    'ThresholdExceeded',
    'TransportFailure',
    # Interfaces
    'ITransport',
    'TransportResponse',
]
