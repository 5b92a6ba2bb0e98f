"""Transport interface for probe requests."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..entities.request_details import RequestEcho, ResponseEcho


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """A response the transport considered successful."""

    status_code: int
    status_text: str
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    request: RequestEcho = field(default_factory=lambda: RequestEcho(url=""))

    def to_echo(self) -> ResponseEcho:
        return ResponseEcho(
            status_code=self.status_code,
            status_text=self.status_text,
            headers=self.headers,
            body=self.body,
        )


class ITransport(ABC):
    """Interface for the capability that performs a GET request.

    Implementations return a TransportResponse, or raise TransportFailure
    for network errors, timeouts and status codes they treat as errors.
    """

    @abstractmethod
    async def get(self, url: str) -> TransportResponse:
        """Perform exactly one GET request against ``url``."""
        pass

    async def aclose(self) -> None:
        """Release any resources held by the transport."""
        return None

    async def __aenter__(self) -> "ITransport":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()
