"""
pulsecheck
==========

Periodic HTTP endpoint health monitor.

Features:
- Layered architecture (Domain → Infrastructure → Application → Presentation)
- Fixed-delay retries with bounded attempts
- Latency threshold classification (healthy / unhealthy / loading)
- Generation-tagged probe cycles: stale results are never published
- Subscriber and callback observers over immutable snapshots

Version: 1.0.0
"""

__version__ = "1.0.0"

from .domain import (
    ConfigurationError,
    HealthCheckConfig,
    HealthState,
    HealthStatus,
    ITransport,
    MonitorState,
    TransportFailure,
    TransportResponse,
)
from .application import HealthMonitor
from .infrastructure import HttpxTransport

__all__ = [
    # Version info
    '__version__',

    # Domain
    'ConfigurationError',
    'HealthCheckConfig',
    'HealthState',
    'HealthStatus',
    'ITransport',
    'MonitorState',
    'TransportFailure',
    'TransportResponse',

    # Application
    'HealthMonitor',

    # Infrastructure
    'HttpxTransport',
]
