"""Presentation layer - User interfaces."""
from .cli import HealthCommand

__all__ = [
    "HealthCommand",
]
