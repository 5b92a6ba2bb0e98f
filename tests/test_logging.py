"""Tests for the structured logging helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import pytest

from pulsecheck.core.logging.config import bootstrap_logging, shutdown_logging
from pulsecheck.core.logging.context import context, cycle_context, get_context
from pulsecheck.core.logging.formatter import ConsoleFormatter, JSONFormatter
from pulsecheck.core.logging.levels import LogLevel, register_levels, to_level
from pulsecheck.core.logging.logger import get_logger


def _record(msg: str = "cycle-complete", **extra) -> logging.LogRecord:
    record = logging.LogRecord("pulsecheck.test", logging.WARNING, __file__, 10, msg, None, None, func="probe")
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLevels:
    @pytest.mark.parametrize(
        "value, expected",
        [("debug", 10), ("SUCCESS", 25), ("trace", 5), ("15", 15), (40, 40), ("nonsense", logging.INFO)],
    )
    def test_to_level(self, value, expected) -> None:
        assert to_level(value) == expected

    def test_register_levels(self) -> None:
        register_levels()
        assert logging.getLevelName(LogLevel.SUCCESS) == "SUCCESS"


class TestContext:
    def test_context_block_binds_and_restores(self) -> None:
        with cycle_context("https://x", 2, 7):
            assert get_context() == {"url": "https://x", "generation": 2, "cycle": 7}
            with context(attempt=1):
                assert get_context()["attempt"] == 1
            assert "attempt" not in get_context()
        assert get_context() == {}


class TestFormatters:
    def test_json_includes_probe_fields_and_context(self) -> None:
        record = _record(url="https://x", latency=12, retries=0, service="monitor", log_context={"cycle": 3})
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "cycle-complete"
        assert payload["level"] == "WARNING"
        assert payload["service"] == "monitor"
        assert payload["url"] == "https://x"
        assert payload["latency"] == 12
        assert payload["retries"] == 0
        assert payload["context"] == {"cycle": 3}
        assert "error" not in payload

    def test_console_line(self) -> None:
        line = ConsoleFormatter().format(_record(url="https://x", error="refused", service="monitor"))
        assert "cycle-complete" in line
        assert "url=https://x error=refused" in line
        assert "| monitor |" in line


class TestStructuredLogger:
    def test_lazy_message_skipped_when_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        calls: List[int] = []
        logger = get_logger("pulsecheck.test.lazy", service="test")

        def build() -> str:
            calls.append(1)
            return "expensive"

        with caplog.at_level(logging.INFO, logger="pulsecheck.test.lazy"):
            logger.debug(build)
            logger.info(build)
        assert calls == [1]
        assert [r.getMessage() for r in caplog.records] == ["expensive"]

    def test_service_and_context_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("pulsecheck.test.ctx", service="monitor")
        with caplog.at_level(logging.INFO, logger="pulsecheck.test.ctx"), context(cycle=4):
            logger.info("probe-start", extra={"url": "https://x"})
        record = caplog.records[0]
        assert record.service == "monitor"
        assert record.url == "https://x"
        assert record.log_context == {"cycle": 4}


class TestBootstrap:
    def test_file_handler_writes_json_lines(self, tmp_path: Path) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            bootstrap_logging(level="INFO", log_dir=tmp_path, log_file_name="test.jsonl", console=False)
            get_logger("pulsecheck.test.file", service="monitor").warning("cycle-complete", extra={"url": "https://x"})
            shutdown_logging()
            lines = (tmp_path / "test.jsonl").read_text().splitlines()
        finally:
            shutdown_logging()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
        payload = json.loads(lines[-1])
        assert payload["message"] == "cycle-complete"
        assert payload["url"] == "https://x"
