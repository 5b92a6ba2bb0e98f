"""Infrastructure API module."""
from .http_transport import HttpxTransport

__all__ = [
    'HttpxTransport',
]
