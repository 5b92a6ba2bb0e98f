"""httpx-backed GET transport."""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from pulsecheck.application.services.health.timeout_config import TimeoutConfig
from pulsecheck.core.logging.logger import StructuredLogger, get_logger
from pulsecheck.domain.entities import RequestEcho
from pulsecheck.domain.errors import TransportFailure
from pulsecheck.domain.interfaces import ITransport, TransportResponse


class HttpxTransport(ITransport):
    """Asynchronous GET transport.

    2xx responses are returned; any other status raises TransportFailure
    carrying the partial response, like a typical HTTP client would.
    Used as ``async with HttpxTransport() as transport`` it keeps one
    connection pool; otherwise each request opens a short-lived client.
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        *,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig.from_env()
        self.headers = headers or {}
        self.session: Optional[httpx.AsyncClient] = client
        self._owns_session = False
        self.logger = logger or get_logger(__name__, service="transport")

    async def __aenter__(self) -> "HttpxTransport":
        if self.session is None:
            self.session = self._build_client()
            self._owns_session = True
        return self

    async def aclose(self) -> None:
        if self.session is not None and self._owns_session:
            await self.session.aclose()
            self.session = None
            self._owns_session = False

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self.headers, timeout=self.timeout.to_httpx(), follow_redirects=True)

    async def get(self, url: str) -> TransportResponse:
        if self.session is not None:
            return await self._get(self.session, url)
        async with self._build_client() as client:
            return await self._get(client, url)

    async def _get(self, client: httpx.AsyncClient, url: str) -> TransportResponse:
        try:
            resp = await client.get(url)
        except httpx.TimeoutException as exc:
            self.logger.debug(lambda: "http-timeout", extra={"url": url, "error": repr(exc)})
            raise TransportFailure(
                f"timeout of {self.timeout.http_total_timeout_ms}ms exceeded",
                request=_request_echo(exc, url),
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.debug(lambda: "http-error", extra={"url": url, "error": repr(exc)})
            raise TransportFailure(str(exc) or exc.__class__.__name__, request=_request_echo(exc, url)) from exc

        response = TransportResponse(
            status_code=resp.status_code,
            status_text=resp.reason_phrase,
            headers=dict(resp.headers),
            body=_decode_body(resp),
            request=RequestEcho(
                url=str(resp.request.url),
                method=resp.request.method,
                headers=dict(resp.request.headers),
            ),
        )
        if not resp.is_success:
            raise TransportFailure(
                f"Request failed with status code {resp.status_code}",
                response=response.to_echo(),
                request=response.request,
            )
        return response


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _request_echo(exc: Exception, url: str) -> RequestEcho:
    try:
        request = exc.request  # type: ignore[attr-defined]
    except (AttributeError, RuntimeError):
        return RequestEcho(url=url)
    return RequestEcho(url=str(request.url), method=request.method, headers=dict(request.headers))
