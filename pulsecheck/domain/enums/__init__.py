"""Domain enumerations."""
from .health_state import HealthState, MonitorState

__all__ = [
    'HealthState',
    'MonitorState',
]
