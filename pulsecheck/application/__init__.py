"""Application layer - Probe, retry, classification and scheduling services."""
from .services import HealthMonitor

__all__ = [
    'HealthMonitor',
]
