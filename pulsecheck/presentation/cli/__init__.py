"""Presentation CLI exports."""
from .health_command import DEFAULT_MESSAGES, HealthCommand

__all__ = [
    "DEFAULT_MESSAGES",
    "HealthCommand",
]
