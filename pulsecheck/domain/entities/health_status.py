"""HealthStatus entity: the snapshot published to consumers."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..enums import HealthState
from .request_details import RequestDetails


@dataclass(frozen=True, slots=True)
class HealthStatus:
    """Immutable health snapshot.

    A new instance replaces the previous one after every completed probe
    cycle; instances are never modified in place.
    """

    status: HealthState = HealthState.LOADING
    last_checked: Optional[datetime] = None
    error: Optional[str] = None
    response_time_ms: Optional[int] = None
    retry_count: int = 0
    request_details: Optional[RequestDetails] = None
    raw_error: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @classmethod
    def loading(cls) -> "HealthStatus":
        """The never-checked snapshot."""
        return cls()

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthState.HEALTHY

    @property
    def settled(self) -> bool:
        return self.status.settled

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a JSON-friendly dictionary."""
        return {
            'status': self.status.value,
            'last_checked': self.last_checked.isoformat() if self.last_checked else None,
            'error': self.error,
            'response_time_ms': self.response_time_ms,
            'retry_count': self.retry_count,
            'request_details': self.request_details.to_dict() if self.request_details else None,
        }
