from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Callable, Dict, Optional, TextIO

from pulsecheck.application.services.health.health_monitor import HealthMonitor, MetricsHook
from pulsecheck.core.logging.logger import StructuredLogger, get_logger
from pulsecheck.domain.entities import HealthCheckConfig, HealthStatus
from pulsecheck.domain.enums import HealthState
from pulsecheck.domain.interfaces import ITransport
from pulsecheck.infrastructure.api.http_transport import HttpxTransport

DEFAULT_MESSAGES: Dict[HealthState, str] = {
    HealthState.HEALTHY: "Status: healthy",
    HealthState.UNHEALTHY: "Status: unhealthy",
    HealthState.LOADING: "Status: loading",
}


class HealthCommand:
    """Terminal consumer of a HealthMonitor: prints every published snapshot."""

    def __init__(
        self,
        *,
        messages: Optional[Dict[HealthState, str]] = None,
        json_out: bool = False,
        developer_mode: bool = False,
        metrics_enabled: bool = False,
        out: Optional[TextIO] = None,
        transport_factory: Optional[Callable[[], ITransport]] = None,
    ) -> None:
        self.logger: StructuredLogger = get_logger(__name__, service="health")
        self.messages = {**DEFAULT_MESSAGES, **(messages or {})}
        self.json_out = json_out
        self.developer_mode = developer_mode
        self.metrics_enabled = metrics_enabled
        self._out = out or sys.stdout
        self._transport_factory = transport_factory or HttpxTransport

    def _metrics_hook(self) -> Optional[MetricsHook]:
        if not self.metrics_enabled:
            return None
        def _hook(name: str, payload: Dict[str, Any]) -> None:
            self.logger.info(lambda: f"METRIC {name} {json.dumps(payload, separators=(',', ':'), default=str)}")
        return _hook

    def render(self, status: HealthStatus) -> str:
        """Format one snapshot for the terminal."""
        if self.json_out:
            return json.dumps(status.to_dict(), separators=(",", ":"), ensure_ascii=False, default=str)

        line = self.messages[status.status]
        if status.last_checked is not None:
            line = f"[{status.last_checked.strftime('%Y-%m-%d %H:%M:%S')}] {line}"
        if status.response_time_ms is not None:
            line += f" ({status.response_time_ms}ms)"
        if status.retry_count:
            line += f" after {status.retry_count} retr{'y' if status.retry_count == 1 else 'ies'}"
        if status.error:
            line += f" - {status.error}"
        if self.developer_mode and status.request_details is not None:
            details = json.dumps(status.request_details.to_dict(), indent=2, ensure_ascii=False, default=str)
            line += "\n" + details
        return line

    def _print(self, status: HealthStatus) -> None:
        print(self.render(status), file=self._out, flush=True)

    async def run(self, config: HealthCheckConfig, *, once: bool = False) -> int:
        """Probe ``config.url``; return the process exit code.

        With ``once`` a single cycle is run and the exit code is 0 when the
        endpoint is healthy, 1 otherwise. Without it the command watches
        until cancelled.
        """
        async with self._transport_factory() as transport:
            monitor = HealthMonitor(config, transport, logger=self.logger, metrics_hook=self._metrics_hook())
            if once:
                status = await monitor.check_now()
                self._print(status)
                return 0 if status.is_healthy else 1

            self._print(monitor.current_status())
            unsubscribe = monitor.subscribe(self._print)
            try:
                async with monitor:
                    await asyncio.Event().wait()
            finally:
                unsubscribe()
        return 0
