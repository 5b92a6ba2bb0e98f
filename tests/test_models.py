"""Tests for domain entities: config validation, snapshots, outcomes."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from pulsecheck.domain.entities import (
    HealthCheckConfig,
    HealthStatus,
    ProbeFailure,
    ProbeSuccess,
    RequestDetails,
    RequestEcho,
    ResponseEcho,
)
from pulsecheck.domain.enums import HealthState, MonitorState
from pulsecheck.domain.errors import ConfigurationError, ExhaustedRetries, ThresholdExceeded


class TestHealthCheckConfig:
    def test_defaults(self) -> None:
        c = HealthCheckConfig(url="https://x/health")
        assert c.interval_ms == 30000
        assert c.enabled is True
        assert c.retry_attempts == 3
        assert c.retry_delay_ms == 5000
        assert c.response_time_threshold_ms == 1000
        assert c.on_healthy is None
        assert c.on_unhealthy is None

    def test_valid_config_validates_to_itself(self) -> None:
        c = HealthCheckConfig(url="https://x/health")
        assert c.validate() is c
        assert c.problems() == []

    @pytest.mark.parametrize(
        "changes, fragment",
        [
            ({"url": ""}, "url"),
            ({"url": "   "}, "url"),
            ({"interval_ms": 0}, "interval_ms"),
            ({"retry_attempts": -1}, "retry_attempts"),
            ({"retry_attempts": 1.5}, "retry_attempts"),
            ({"retry_delay_ms": -5}, "retry_delay_ms"),
            ({"response_time_threshold_ms": 0}, "response_time_threshold_ms"),
        ],
    )
    def test_invalid_fields_rejected(self, changes: dict, fragment: str) -> None:
        c = HealthCheckConfig(url="https://x/health").evolve(**changes)
        with pytest.raises(ConfigurationError) as exc:
            c.validate()
        assert any(fragment in p for p in exc.value.problems)

    def test_all_problems_reported_together(self) -> None:
        c = HealthCheckConfig(url="", interval_ms=-1, retry_attempts=-1)
        with pytest.raises(ConfigurationError) as exc:
            c.validate()
        assert len(exc.value.problems) == 3

    def test_zero_retries_and_zero_delay_are_valid(self) -> None:
        HealthCheckConfig(url="https://x", retry_attempts=0, retry_delay_ms=0).validate()

    def test_immutable(self) -> None:
        c = HealthCheckConfig(url="https://x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.url = "https://y"  # type: ignore[misc]

    def test_evolve_returns_copy(self) -> None:
        c = HealthCheckConfig(url="https://x")
        d = c.evolve(interval_ms=10)
        assert c.interval_ms == 30000
        assert d.interval_ms == 10
        assert d.url == "https://x"

    def test_callbacks_ignored_by_equality(self) -> None:
        a = HealthCheckConfig(url="https://x", on_healthy=lambda r: None)
        b = HealthCheckConfig(url="https://x")
        assert a == b

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HEALTH_URL", "https://env/health")
        monkeypatch.setenv("HEALTH_INTERVAL_MS", "1500")
        monkeypatch.setenv("HEALTH_ENABLED", "false")
        monkeypatch.setenv("HEALTH_RETRY_ATTEMPTS", "not-a-number")
        monkeypatch.setenv("HEALTH_RETRY_DELAY_MS", "250")
        monkeypatch.setenv("HEALTH_RESPONSE_TIME_THRESHOLD_MS", "800")
        c = HealthCheckConfig.from_env()
        assert c.url == "https://env/health"
        assert c.interval_ms == 1500
        assert c.enabled is False
        assert c.retry_attempts == 3
        assert c.retry_delay_ms == 250
        assert c.response_time_threshold_ms == 800

    def test_from_env_explicit_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HEALTH_URL", "https://env/health")
        assert HealthCheckConfig.from_env(url="https://arg").url == "https://arg"


class TestHealthStatus:
    def test_loading_snapshot(self) -> None:
        s = HealthStatus.loading()
        assert s.status is HealthState.LOADING
        assert s.last_checked is None
        assert s.error is None
        assert s.response_time_ms is None
        assert s.retry_count == 0
        assert s.request_details is None
        assert not s.settled
        assert not s.is_healthy

    def test_frozen(self) -> None:
        s = HealthStatus.loading()
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.error = "x"  # type: ignore[misc]

    def test_raw_error_excluded_from_equality(self) -> None:
        assert HealthStatus(raw_error=RuntimeError("a")) == HealthStatus()

    def test_to_dict(self) -> None:
        checked = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        s = HealthStatus(
            status=HealthState.UNHEALTHY,
            last_checked=checked,
            error="boom",
            retry_count=2,
            request_details=RequestDetails(
                request=RequestEcho(url="https://x", headers={"a": "1"}),
                response=ResponseEcho(status_code=503, status_text="Service Unavailable", body="down"),
            ),
        )
        d = s.to_dict()
        assert d["status"] == "unhealthy"
        assert d["last_checked"] == "2026-01-02T03:04:05+00:00"
        assert d["error"] == "boom"
        assert d["response_time_ms"] is None
        assert d["retry_count"] == 2
        assert d["request_details"]["request"] == {"url": "https://x", "method": "GET", "headers": {"a": "1"}}
        assert d["request_details"]["response"]["status"] == 503
        assert d["request_details"]["response"]["data"] == "down"

    def test_request_details_without_response(self) -> None:
        d = RequestDetails(request=RequestEcho(url="https://x")).to_dict()
        assert "response" not in d


class TestEchoes:
    def test_headers_are_read_only(self) -> None:
        source = {"a": "1"}
        echo = RequestEcho(url="https://x", headers=source)
        source["b"] = "2"
        assert dict(echo.headers) == {"a": "1"}
        with pytest.raises(TypeError):
            echo.headers["c"] = "3"  # type: ignore[index]


    def test_response_body_is_read_only_copy(self) -> None:
        source = {"status": "ok", "checks": [{"db": "up"}]}
        echo = ResponseEcho(status_code=200, status_text="OK", body=source)
        source["status"] = "changed"
        source["checks"][0]["db"] = "down"
        assert echo.body["status"] == "ok"
        assert echo.body["checks"][0]["db"] == "up"
        with pytest.raises(TypeError):
            echo.body["status"] = "tampered"  # type: ignore[index]
        with pytest.raises(TypeError):
            echo.body["checks"][0]["db"] = "down"  # type: ignore[index]

    def test_to_dict_returns_plain_body(self) -> None:
        echo = ResponseEcho(status_code=200, body={"checks": [{"db": "up"}]})
        data = echo.to_dict()["data"]
        assert data == {"checks": [{"db": "up"}]}
        assert type(data) is dict
        assert type(data["checks"]) is list

    def test_text_body_unchanged(self) -> None:
        assert ResponseEcho(status_code=503, body="down").body == "down"


class TestProbeOutcome:
    def test_success_body_snapshot_cannot_be_mutated(self) -> None:
        body = {"status": "ok"}
        s = ProbeSuccess(
            status_code=200, status_text="OK", headers={}, body=body, request_method="GET", request_url="https://x"
        )
        body["status"] = "tampered"
        details_body = s.request_details().response.body
        assert details_body["status"] == "ok"
        with pytest.raises(TypeError):
            details_body["status"] = "tampered"  # type: ignore[index]

    def test_success_details(self) -> None:
        s = ProbeSuccess(
            status_code=200,
            status_text="OK",
            headers={"content-type": "text/plain"},
            body="ok",
            request_method="GET",
            request_url="https://x",
        )
        assert s.ok
        details = s.request_details()
        assert details.request.url == "https://x"
        assert details.response is not None
        assert details.response.status_code == 200

    def test_failure_details(self) -> None:
        f = ProbeFailure(error_message="refused", request_url="https://x")
        assert not f.ok
        details = f.request_details()
        assert details.request.method == "GET"
        assert details.response is None


class TestEnumsAndErrors:
    def test_monitor_state_from_health(self) -> None:
        assert MonitorState.from_health(HealthState.HEALTHY) is MonitorState.HEALTHY
        assert MonitorState.from_health(HealthState.LOADING) is MonitorState.LOADING

    def test_health_state_is_str(self) -> None:
        assert HealthState.HEALTHY == "healthy"

    def test_threshold_message(self) -> None:
        e = ThresholdExceeded(1500, 1000)
        assert str(e) == "Response time (1500ms) exceeded threshold (1000ms)"

    def test_exhausted_retries_keeps_message(self) -> None:
        raw = RuntimeError("x")
        e = ExhaustedRetries("connection refused", retry_count=2, raw_error=raw)
        assert str(e) == "connection refused"
        assert e.retry_count == 2
        assert e.raw_error is raw
