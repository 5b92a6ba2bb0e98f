"""Main CLI entry-point."""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

from pulsecheck import __version__
from pulsecheck.config import settings
from pulsecheck.core.logging.config import bootstrap_logging, shutdown_logging
from pulsecheck.domain.entities import HealthCheckConfig
from pulsecheck.domain.enums import HealthState
from pulsecheck.domain.errors import ConfigurationError
from pulsecheck.presentation.cli import HealthCommand

EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pulsecheck", description="Periodic HTTP endpoint health monitor.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    watch = sub.add_parser("watch", help="probe an endpoint and print its health")
    watch.add_argument("url", nargs="?", default=None, help="endpoint to probe (default: $HEALTH_URL)")
    watch.add_argument("--interval", type=int, dest="interval_ms", help="milliseconds between probe cycles")
    watch.add_argument("--retry-attempts", type=int, dest="retry_attempts", help="retries after a failed attempt")
    watch.add_argument("--retry-delay", type=int, dest="retry_delay_ms", help="milliseconds between retries")
    watch.add_argument("--threshold", type=int, dest="response_time_threshold_ms", help="slowest healthy response, in ms")
    watch.add_argument("--once", action="store_true", help="run a single cycle; exit 0 if healthy, 1 otherwise")
    watch.add_argument("--json", action="store_true", dest="json_out", help="print snapshots as JSON lines")
    watch.add_argument("--developer", action="store_true", help="echo request/response details")
    watch.add_argument("--metrics", action="store_true", help="log cycle metrics")
    watch.add_argument("--healthy-message", default=None)
    watch.add_argument("--unhealthy-message", default=None)
    watch.add_argument("--loading-message", default=None)
    watch.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser


def build_config(args: argparse.Namespace) -> HealthCheckConfig:
    """Environment defaults overridden by command-line options, validated."""
    config = HealthCheckConfig.from_env(url=args.url)
    overrides = {
        name: getattr(args, name)
        for name in ("interval_ms", "retry_attempts", "retry_delay_ms", "response_time_threshold_ms")
        if getattr(args, name) is not None
    }
    return config.evolve(**overrides).validate()


def build_command(args: argparse.Namespace) -> HealthCommand:
    messages = {
        state: text
        for state, text in (
            (HealthState.HEALTHY, args.healthy_message),
            (HealthState.UNHEALTHY, args.unhealthy_message),
            (HealthState.LOADING, args.loading_message),
        )
        if text
    }
    return HealthCommand(
        messages=messages,
        json_out=args.json_out,
        developer_mode=args.developer,
        metrics_enabled=args.metrics,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"pulsecheck: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    bootstrap_logging(
        service="pulsecheck",
        level=args.log_level or settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR if settings.LOG_TO_FILE else None,
        log_file_name="pulsecheck.jsonl",
    )
    try:
        return asyncio.run(build_command(args).run(config, once=args.once))
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    finally:
        shutdown_logging()


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
