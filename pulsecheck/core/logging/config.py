from __future__ import annotations

import logging
import os
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import Optional

from .formatter import ConsoleFormatter, JSONFormatter
from .levels import register_levels, to_level

_listener: QueueListener | None = None


def bootstrap_logging(
    *,
    service: str = "pulsecheck",
    level: str | int | None = None,
    log_dir: Optional[Path] = None,
    log_file_name: str = "pulsecheck.jsonl",
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
    console: Optional[bool] = None,
) -> None:
    """Configure the root logger.

    Installs a colored console handler when ``console`` is true (defaults to
    the LOG_CONSOLE env var) and, when ``log_dir`` is given, a rotating
    JSON-lines file handler fed through a queue so probe cycles never block
    on disk I/O.
    """
    global _listener
    shutdown_logging()
    register_levels()
    root = logging.getLogger()
    root.handlers.clear()
    lvl = to_level(level or os.getenv("LOG_LEVEL", "INFO"))
    root.setLevel(lvl)

    if console is None:
        console = os.getenv("LOG_CONSOLE", "false").strip().lower() == "true"
    if console:
        console_level_str = os.getenv("LOG_CONSOLE_LEVEL", "")
        stream = logging.StreamHandler()
        stream.setLevel(to_level(console_level_str) if console_level_str else lvl)
        stream.setFormatter(ConsoleFormatter())
        root.addHandler(stream)

    if log_dir:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            json_handler = RotatingFileHandler(str(log_dir / log_file_name), maxBytes=max_bytes, backupCount=backup_count)
        except OSError as exc:
            logging.getLogger(__name__).warning("file logging disabled: %s", exc)
        else:
            json_handler.setLevel(lvl)
            json_handler.setFormatter(JSONFormatter())
            q: Queue[logging.LogRecord] = Queue(-1)
            root.addHandler(QueueHandler(q))
            _listener = QueueListener(q, json_handler, respect_handler_level=True)
            _listener.start()

    if not root.handlers:
        root.addHandler(logging.NullHandler())
    logging.getLogger(service).debug("logging configured (level=%s)", logging.getLevelName(lvl))


def shutdown_logging() -> None:
    """Flush and stop the background file listener, if any."""
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
