from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict

from .context import get_context

_LEVEL_COLORS = {
    "TRACE": "\033[90m",
    "DEBUG": "\033[37m",
    "INFO": "\033[36m",
    "SUCCESS": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"

# Fields passed through ``extra=`` by the probe engine.
PROBE_FIELDS = ("url", "status", "latency", "attempt", "retries", "error", "state")


def _record_metadata(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(record.created)),
        "level": record.levelname,
        "service": getattr(record, "service", None),
        "module": record.module,
        "function": record.funcName,
        "line_number": record.lineno,
        "thread_id": record.thread,
        "process_id": record.process,
    }


def _probe_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: getattr(record, k) for k in PROBE_FIELDS if getattr(record, k, None) is not None}


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        try:
            md = _record_metadata(record)
            ctx = getattr(record, "log_context", None) or get_context()
            lvl = record.levelname
            color = _LEVEL_COLORS.get(lvl, "")
            parts = [
                f"{md['timestamp']}",
                f"{lvl}",
                f"{md['service'] or '-'}",
                f"{md['module']}:{md['function']}:{md['line_number']}",
                record.getMessage(),
            ]
            fields = _probe_fields(record)
            if fields:
                parts.append(" ".join(f"{k}={v}" for k, v in fields.items()))
            exec_ms = getattr(record, "execution_time_ms", None)
            if exec_ms is not None:
                parts.append(f"t={exec_ms}ms")
            if ctx:
                parts.append(" ".join(f"{k}={v}" for k, v in ctx.items()))
            if record.exc_info:
                parts.append(self.formatException(record.exc_info))
            return f"{color}{' | '.join(parts)}{_RESET}"
        except Exception:
            return record.getMessage()


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        try:
            payload: Dict[str, Any] = _record_metadata(record)
            payload["message"] = record.getMessage()
            payload.update(_probe_fields(record))
            ctx = getattr(record, "log_context", None) or get_context()
            if ctx:
                payload["context"] = ctx
            exec_ms = getattr(record, "execution_time_ms", None)
            if exec_ms is not None:
                payload["execution_time_ms"] = exec_ms
            if record.exc_info:
                payload["exception"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str, separators=(",", ":"))
        except Exception:
            return json.dumps({"message": "log format error"}, separators=(",", ":"))
