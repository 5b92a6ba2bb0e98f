"""Outcome of a single probe attempt."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .request_details import RequestDetails, RequestEcho, ResponseEcho, freeze_body


@dataclass(frozen=True, slots=True)
class ProbeSuccess:
    """The endpoint answered with HTTP 200."""

    status_code: int
    status_text: str
    headers: Mapping[str, Any]
    body: Any
    request_method: str
    request_url: str
    request_headers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "body", freeze_body(self.body))
        object.__setattr__(self, "request_headers", MappingProxyType(dict(self.request_headers)))

    @property
    def ok(self) -> bool:
        return True

    def request_details(self) -> RequestDetails:
        return RequestDetails(
            request=RequestEcho(url=self.request_url, method=self.request_method, headers=self.request_headers),
            response=ResponseEcho(
                status_code=self.status_code,
                status_text=self.status_text,
                headers=self.headers,
                body=self.body,
            ),
        )


@dataclass(frozen=True, slots=True)
class ProbeFailure:
    """The attempt failed; ``response`` is set when a partial response exists."""

    error_message: str
    raw_error: Optional[BaseException] = None
    response: Optional[ResponseEcho] = None
    request_method: str = "GET"
    request_url: str = ""
    request_headers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "request_headers", MappingProxyType(dict(self.request_headers)))

    @property
    def ok(self) -> bool:
        return False

    def request_details(self) -> RequestDetails:
        return RequestDetails(
            request=RequestEcho(url=self.request_url, method=self.request_method, headers=self.request_headers),
            response=self.response,
        )


ProbeOutcome = Union[ProbeSuccess, ProbeFailure]
