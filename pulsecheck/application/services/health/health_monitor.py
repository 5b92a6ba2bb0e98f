from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from pulsecheck.core.logging.context import cycle_context
from pulsecheck.core.logging.logger import StructuredLogger, get_logger
from pulsecheck.domain.entities import (
    HealthCheckConfig,
    HealthStatus,
    ProbeOutcome,
    RequestDetails,
    RequestEcho,
)
from pulsecheck.domain.enums import HealthState, MonitorState
from pulsecheck.domain.errors import ConfigurationError
from pulsecheck.domain.interfaces import ITransport
from .classifier import Classification, HealthClassifier
from .probe_executor import UNKNOWN_ERROR, ProbeExecutor
from .retry_policy import RetryPolicy
from .status_publisher import StatusCallback, StatusPublisher, Unsubscribe


MetricsHook = Callable[[str, Dict[str, Any]], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthMonitor:
    """Probes one endpoint on a timer and publishes classified snapshots.

    One cycle runs at a time: a timer tick that arrives while a cycle
    (retries included) is still running is dropped. Each cycle is tagged
    with the generation that started it; disabling, stopping or changing
    the URL bumps the generation, so a cycle that finishes afterwards is
    discarded instead of published.

    All methods must be called from the thread running the event loop.
    ``start()`` and ``reconfigure()`` need a running loop only when they
    have to schedule work.
    """

    def __init__(
        self,
        config: HealthCheckConfig,
        transport: ITransport,
        *,
        logger: Optional[StructuredLogger] = None,
        classifier: Optional[HealthClassifier] = None,
        metrics_hook: Optional[MetricsHook] = None,
        clock: Callable[[], float] = time.perf_counter,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Validate ``config`` and set up the monitor; no probing happens until start()."""
        self.logger = logger or get_logger(__name__, service="monitor")
        try:
            config.validate()
        except ConfigurationError as e:
            self.logger.error(lambda: "config-invalid", extra={"error": str(e)})
            raise
        self.executor = ProbeExecutor(transport, self.logger)
        self.classifier = classifier or HealthClassifier()
        self.publisher = StatusPublisher(self.logger)
        self.metrics_hook = metrics_hook
        self._config = config
        self._clock = clock
        self._now = now
        self._generation = 0
        self._cycles = 0
        self._active = False
        self._stopped = False
        self._timer_task: Optional[asyncio.Task[None]] = None
        self._cycle_task: Optional[asyncio.Task[Optional[HealthStatus]]] = None
        self._abandoned: set[asyncio.Task[Any]] = set()

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def config(self) -> HealthCheckConfig:
        return self._config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        """True while the periodic timer is armed."""
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def state(self) -> MonitorState:
        if self._stopped or not self._config.enabled:
            return MonitorState.DISABLED
        return MonitorState.from_health(self.publisher.current_status().status)

    def current_status(self) -> HealthStatus:
        """Latest published snapshot; no side effects."""
        return self.publisher.current_status()

    def subscribe(self, callback: StatusCallback) -> Unsubscribe:
        return self.publisher.subscribe(callback)

    def start(self) -> None:
        """Begin periodic probing: one cycle now, then one per interval."""
        if self.running:
            self.logger.warning(lambda: "monitor-already-running", extra={"url": self._config.url})
            return
        self._active = True
        self._stopped = False
        if not self._config.enabled:
            self.logger.info(lambda: "monitor-start-disabled", extra={"url": self._config.url})
            return
        self._arm_timer(immediate=True)
        self.logger.info(
            lambda: f"monitor-started (interval={self._config.interval_ms}ms)",
            extra={"url": self._config.url},
        )

    def stop(self) -> None:
        """Cancel the timer and abandon any in-flight cycle.

        The current snapshot is left as it is.
        """
        self._active = False
        self._stopped = True
        self._invalidate()
        self.logger.info(lambda: "monitor-stopped", extra={"url": self._config.url})

    async def aclose(self) -> None:
        """Stop and wait for cancelled tasks to unwind."""
        self.stop()
        if self._abandoned:
            await asyncio.gather(*list(self._abandoned), return_exceptions=True)

    async def __aenter__(self) -> "HealthMonitor":
        self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    def reconfigure(self, config: HealthCheckConfig) -> None:
        """Atomically replace the configuration.

        An invalid config disables the monitor and raises
        ConfigurationError; it stays disabled until a valid config arrives.
        """
        previous = self._config
        try:
            config.validate()
        except ConfigurationError as e:
            self.logger.error(lambda: "config-invalid", extra={"url": previous.url, "error": str(e)})
            self._config = previous.evolve(enabled=False)
            if previous.enabled:
                self._invalidate()
                self._reset("config-invalid")
            raise

        self._config = config
        url_changed = previous.url != config.url

        if not config.enabled:
            if previous.enabled or url_changed:
                self._invalidate()
                self._reset("disabled" if previous.enabled else "url-changed")
            return

        if url_changed or not previous.enabled:
            self._invalidate()
            self._reset("url-changed" if url_changed else "enabled")
            if self._active:
                self._arm_timer(immediate=True)
            return

        if previous.interval_ms != config.interval_ms and self._active:
            self._cancel_timer()
            self._arm_timer(immediate=False)
            self.logger.info(
                lambda: f"interval-changed {previous.interval_ms}ms -> {config.interval_ms}ms",
                extra={"url": config.url},
            )

    def update(self, **changes: Any) -> None:
        """Shorthand for ``reconfigure(config.evolve(**changes))``."""
        self.reconfigure(self._config.evolve(**changes))

    async def check_now(self) -> HealthStatus:
        """Run one probe cycle now and return the resulting snapshot.

        Joins the in-flight cycle instead of starting an overlapping one.
        When the monitor is disabled, returns the current snapshot without
        probing. If the cycle is abandoned while awaited, the snapshot
        current at that time is returned.
        """
        if self._stopped or not self._config.enabled:
            return self.current_status()
        if self._cycle_task is None or self._cycle_task.done():
            self._cycle_task = asyncio.create_task(
                self._run_cycle(self._generation, self._config), name="health-monitor-cycle"
            )
        task = self._cycle_task
        try:
            status = await asyncio.shield(task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not task.cancelled() or (current is not None and current.cancelling()):
                raise
            return self.current_status()
        return status if status is not None else self.current_status()

    # ── Scheduling ───────────────────────────────────────────────────────

    def _arm_timer(self, *, immediate: bool) -> None:
        self._timer_task = asyncio.create_task(
            self._run_timer(self._generation, self._config.interval_ms, immediate),
            name="health-monitor-timer",
        )

    async def _run_timer(self, generation: int, interval_ms: int, immediate: bool) -> None:
        if immediate:
            self._tick(generation)
        while True:
            await asyncio.sleep(interval_ms / 1000.0)
            self._tick(generation)

    def _tick(self, generation: int) -> None:
        if generation != self._generation:
            return
        if self._cycle_task is not None and not self._cycle_task.done():
            self.logger.debug(lambda: "tick-dropped", extra={"url": self._config.url})
            self._metric("tick_dropped", {"url": self._config.url})
            return
        self._cycle_task = asyncio.create_task(
            self._run_cycle(generation, self._config), name="health-monitor-cycle"
        )

    def _cancel_timer(self) -> None:
        if self._timer_task is not None and not self._timer_task.done():
            self._abandon(self._timer_task)
        self._timer_task = None

    def _invalidate(self) -> None:
        self._generation += 1
        self._cancel_timer()
        if self._cycle_task is not None and not self._cycle_task.done():
            self._abandon(self._cycle_task)
        self._cycle_task = None

    def _abandon(self, task: asyncio.Task[Any]) -> None:
        task.cancel()
        self._abandoned.add(task)
        task.add_done_callback(self._abandoned.discard)

    def _reset(self, reason: str) -> None:
        if self.publisher.current_status() == HealthStatus.loading():
            return
        self.logger.info(lambda: f"status-reset ({reason})", extra={"url": self._config.url})
        self.publisher.publish(HealthStatus.loading())

    # ── Probe cycle ──────────────────────────────────────────────────────

    async def _run_cycle(self, generation: int, config: HealthCheckConfig) -> Optional[HealthStatus]:
        self._cycles += 1
        with cycle_context(config.url, generation, self._cycles):
            self.logger.debug(lambda: "cycle-start", extra={"url": config.url})
            try:
                status, classification, outcome = await self._probe_cycle(config)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error(lambda: "cycle-crashed", extra={"url": config.url, "error": str(e)}, exc_info=True)
                status = HealthStatus(
                    status=HealthState.UNHEALTHY,
                    last_checked=self._now(),
                    error=str(e) or UNKNOWN_ERROR,
                    request_details=RequestDetails(request=RequestEcho(url=config.url)),
                    raw_error=e,
                )
                classification, outcome = None, None
                failure: Any = e
            else:
                failure = classification.failure

            if generation != self._generation:
                self.logger.info(lambda: "cycle-discarded", extra={"url": config.url})
                self._metric("cycle_discarded", {"url": config.url, "generation": generation})
                return None

            self.publisher.publish(status)
            self._log_result(config, status)
            self._metric(
                "cycle_completed",
                {
                    "url": config.url,
                    "status": status.status.value,
                    "latency_ms": status.response_time_ms,
                    "retries": status.retry_count,
                },
            )
            if generation != self._generation:
                # a subscriber reconfigured the monitor during delivery
                self.logger.info(lambda: "callbacks-skipped", extra={"url": config.url})
                return status
            if status.is_healthy:
                self._notify("on_healthy", config.on_healthy, outcome)
            else:
                self._notify("on_unhealthy", config.on_unhealthy, failure)
            return status

    async def _probe_cycle(self, config: HealthCheckConfig) -> tuple[HealthStatus, Classification, ProbeOutcome]:
        retry = RetryPolicy.from_config(config)
        started = self._clock()
        result = await retry.run(
            lambda: self.executor.probe(config.url),
            is_retryable=lambda outcome: not outcome.ok,
            logger=self.logger,
            context={"url": config.url},
        )
        elapsed_ms = (self._clock() - started) * 1000.0
        outcome = result.value
        classification = self.classifier.classify(
            outcome,
            elapsed_ms,
            config.response_time_threshold_ms,
            retry_count=result.retries,
        )
        status = HealthStatus(
            status=classification.state,
            last_checked=self._now(),
            error=classification.error,
            response_time_ms=round(elapsed_ms) if outcome.ok else None,
            retry_count=result.retries,
            request_details=outcome.request_details(),
            raw_error=None if outcome.ok else outcome.raw_error,
        )
        return status, classification, outcome

    def _log_result(self, config: HealthCheckConfig, status: HealthStatus) -> None:
        extra = {
            "url": config.url,
            "state": status.status.value,
            "latency": status.response_time_ms,
            "retries": status.retry_count,
        }
        if status.is_healthy:
            self.logger.success(lambda: "cycle-complete", extra=extra)
        else:
            self.logger.warning(lambda: "cycle-complete", extra={**extra, "error": status.error})

    def _notify(self, name: str, callback: Optional[Callable[[Any], None]], payload: Any) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception:
            self.logger.error(lambda: f"{name}-callback-failed", extra={"url": self._config.url}, exc_info=True)

    def _metric(self, name: str, payload: Dict[str, Any]) -> None:
        if self.metrics_hook:
            try:
                self.metrics_hook(name, payload)
            except Exception:
                self.logger.debug(lambda: f"metrics-hook-failed {name}", exc_info=True)
