from __future__ import annotations

from pulsecheck.core.logging.logger import StructuredLogger, traceable
from pulsecheck.domain.entities import ProbeFailure, ProbeOutcome, ProbeSuccess, RequestEcho, ResponseEcho
from pulsecheck.domain.errors import TransportFailure
from pulsecheck.domain.interfaces import ITransport

UNKNOWN_ERROR = "Unknown error occurred"


class ProbeExecutor:
    """Performs one GET per call through an injected transport.

    Never raises for request problems: every failure, including bugs in a
    transport, comes back as a ProbeFailure. Timing is left to the caller.
    """

    def __init__(self, transport: ITransport, logger: StructuredLogger) -> None:
        self.transport = transport
        self.logger = logger

    @traceable
    async def probe(self, url: str) -> ProbeOutcome:
        self.logger.info(lambda: "probe-start", extra={"url": url})
        try:
            response = await self.transport.get(url)
        except TransportFailure as e:
            return self._failure(url, e.message or UNKNOWN_ERROR, e, e.response, e.request)
        except Exception as e:
            return self._failure(url, str(e) or UNKNOWN_ERROR, e, None, None)

        if response.status_code != 200:
            # 2xx other than 200 is treated as a failure, same retry path as transport errors.
            message = f"HTTP {response.status_code}: {response.status_text}"
            error = TransportFailure(message, response=response.to_echo(), request=response.request)
            return self._failure(url, message, error, error.response, response.request)

        self.logger.success(lambda: "probe-ok", extra={"url": url, "status": response.status_code})
        return ProbeSuccess(
            status_code=response.status_code,
            status_text=response.status_text,
            headers=response.headers,
            body=response.body,
            request_method=response.request.method,
            request_url=response.request.url or url,
            request_headers=response.request.headers,
        )

    def _failure(
        self,
        url: str,
        message: str,
        error: BaseException,
        response: ResponseEcho | None,
        request: RequestEcho | None,
    ) -> ProbeFailure:
        self.logger.warning(
            lambda: "probe-failed",
            extra={
                "url": url,
                "status": response.status_code if response else None,
                "error": message,
            },
        )
        return ProbeFailure(
            error_message=message,
            raw_error=error,
            response=response,
            request_method=request.method if request else "GET",
            request_url=(request.url if request else "") or url,
            request_headers=request.headers if request else {},
        )
