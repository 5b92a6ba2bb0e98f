"""Domain interfaces."""
from .transport import ITransport, TransportResponse

__all__ = [
    'ITransport',
    'TransportResponse',
]
