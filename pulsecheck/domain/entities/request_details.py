"""Request/response echo entities used for diagnostics."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


def _freeze(headers: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(headers or {}))


def freeze_body(value: Any) -> Any:
    """Read-only deep copy of a decoded body: mappings become mappingproxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_body(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_body(v) for v in value)
    return value


def thaw_body(value: Any) -> Any:
    """Plain dict/list copy of a frozen body, for serialization."""
    if isinstance(value, Mapping):
        return {k: thaw_body(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw_body(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class RequestEcho:
    """The request that was sent."""

    url: str
    method: str = "GET"
    headers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze(self.headers))

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "method": self.method, "headers": dict(self.headers)}


@dataclass(frozen=True, slots=True)
class ResponseEcho:
    """The response that came back, complete or partial."""

    status_code: int
    status_text: str = ""
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze(self.headers))
        object.__setattr__(self, "body", freeze_body(self.body))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status_code,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "data": thaw_body(self.body),
        }


@dataclass(frozen=True, slots=True)
class RequestDetails:
    """Echo of the last request/response pair of a probe cycle.

    ``response`` is absent when the request never produced a response
    (connection refused, DNS failure, timeout).
    """

    request: RequestEcho
    response: Optional[ResponseEcho] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"request": self.request.to_dict()}
        if self.response is not None:
            payload["response"] = self.response.to_dict()
        return payload
