from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import pytest

from pulsecheck.domain.entities import RequestEcho, ResponseEcho
from pulsecheck.domain.errors import TransportFailure
from pulsecheck.domain.interfaces import ITransport, TransportResponse


def ok_response(url: str = "https://x/health", status_code: int = 200, status_text: str = "OK", body: Any = None) -> TransportResponse:
    return TransportResponse(
        status_code=status_code,
        status_text=status_text,
        headers={"content-type": "application/json"},
        body={"status": "ok"} if body is None else body,
        request=RequestEcho(url=url, method="GET", headers={"accept": "*/*"}),
    )


def refused(message: str = "connection refused") -> TransportFailure:
    return TransportFailure(message)


def server_error(url: str = "https://x/health", status_code: int = 503) -> TransportFailure:
    return TransportFailure(
        f"Request failed with status code {status_code}",
        response=ResponseEcho(status_code=status_code, status_text="Service Unavailable", body="down"),
        request=RequestEcho(url=url),
    )


class ScriptedTransport(ITransport):
    """Plays back a script of responses/exceptions; the last step repeats."""

    def __init__(self, *steps: Any) -> None:
        self.steps: List[Any] = list(steps)
        self.calls: List[str] = []

    async def get(self, url: str) -> TransportResponse:
        self.calls.append(url)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        if isinstance(step, BaseException):
            raise step
        if callable(step):
            return step(url)
        return step


class GatedTransport(ITransport):
    """Blocks every request until ``release`` is set."""

    def __init__(self, response: Optional[Callable[[str], TransportResponse]] = None, *, ignore_cancel: bool = False) -> None:
        self.response = response or ok_response
        self.ignore_cancel = ignore_cancel
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls: List[str] = []

    async def get(self, url: str) -> TransportResponse:
        self.calls.append(url)
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            if not self.ignore_cancel:
                raise
            await self.release.wait()
        return self.response(url)


class StepClock:
    """Returns the given readings in order, then keeps returning the last one."""

    def __init__(self, *readings: float) -> None:
        self.readings = list(readings)

    def __call__(self) -> float:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


class Recorder:
    """Collects callback payloads."""

    def __init__(self) -> None:
        self.items: List[Any] = []

    def __call__(self, payload: Any) -> None:
        self.items.append(payload)

    def __len__(self) -> int:
        return len(self.items)


@pytest.fixture
def healthy_calls() -> Recorder:
    return Recorder()


@pytest.fixture
def unhealthy_calls() -> Recorder:
    return Recorder()
