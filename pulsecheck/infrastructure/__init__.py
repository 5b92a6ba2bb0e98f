"""Infrastructure layer - HTTP transport."""
from .api import HttpxTransport

__all__ = [
    'HttpxTransport',
]
