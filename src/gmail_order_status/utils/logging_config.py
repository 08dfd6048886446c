"""
Logging setup for gmail-order-status.

Console output always goes to stderr: stdout carries CLI JSON payloads and
the MCP stdio transport. Entry update runs also append to a rotating run log
under ``LOG_DIR`` so scheduled runs leave a trail.
"""

from collections.abc import Mapping, Sequence
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import time
from typing import Any

LOG_DIR = Path.home() / ".cache" / "gmail-order-status" / "logs"

CONSOLE_FORMAT = "%(name)s %(levelname)s: %(message)s"
RUN_FILE_FORMAT = "%(asctime)s %(levelname)s [%(run)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

RUN_LOG_MAX_BYTES = 5 * 1024 * 1024
RUN_LOG_BACKUPS = 3

# Failures listed individually in a run summary; the rest are counted
MAX_LISTED_FAILURES = 10

QUIET_LOGGERS = {
    # logs every discovery-cache miss at WARNING
    "googleapiclient.discovery_cache": logging.ERROR,
    "google.auth.transport.requests": logging.WARNING,
}

_run_loggers: set[str] = set()


def get_log_level() -> int:
    """
    Resolve the level from LOG_LEVEL, then the DEBUG flag.

    Unknown LOG_LEVEL names fall through to the DEBUG check.
    """
    name = os.getenv("LOG_LEVEL", "").upper()
    level = logging.getLevelNamesMapping().get(name)
    if level:
        return level

    if os.getenv("DEBUG", "").lower() in ("true", "1", "yes"):
        return logging.DEBUG

    return logging.INFO


def run_log_path(run_name: str) -> Path:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_DIR / f"{run_name}.log"


class RunContextFilter(logging.Filter):
    """Stamp records with the run name used in the run log format."""

    def __init__(self, run_name: str) -> None:
        super().__init__()
        self.run_name = run_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = self.run_name
        return True


def setup_task_logger(task_name: str, level: int | None = None) -> logging.Logger:
    """
    Logger for a scheduled run such as ``entry_update``.

    Records still propagate to the console handler installed by
    :func:`initialize_logging`; the extra handler appends them to
    ``LOG_DIR/<task_name>.log``. Repeated calls return the same logger.
    """
    logger = logging.getLogger(f"gmail_order_status.tasks.{task_name}")
    if task_name in _run_loggers:
        return logger

    logger.setLevel(level or get_log_level())

    handler = logging.handlers.RotatingFileHandler(
        run_log_path(task_name),
        maxBytes=RUN_LOG_MAX_BYTES,
        backupCount=RUN_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(RUN_FILE_FORMAT, DATE_FORMAT))
    handler.addFilter(RunContextFilter(task_name))
    logger.addHandler(handler)

    _run_loggers.add(task_name)
    return logger


def _format_fields(fields: Mapping[str, Any]) -> str:
    return ", ".join(f"{k}={v}" for k, v in fields.items())


def log_task_start(logger: logging.Logger, task_name: str, **metadata: Any) -> None:
    """One line announcing a run, with its scope (accounts, filters)."""
    if metadata:
        logger.info(f"{task_name} started ({_format_fields(metadata)})")
    else:
        logger.info(f"{task_name} started")


def log_task_end(
    logger: logging.Logger,
    task_name: str,
    counters: Mapping[str, int] | None = None,
    failures: Sequence[str] = (),
) -> None:
    """
    Summarize a finished run.

    Args:
        logger: Logger instance
        task_name: Name of the run
        counters: Final counters, printed on the summary line
        failures: One description per failed filter or account
    """
    summary = f"{task_name} finished"
    if counters:
        summary = f"{summary} ({_format_fields(counters)})"
    logger.info(summary)

    for failure in failures[:MAX_LISTED_FAILURES]:
        logger.warning(f"  failed: {failure}")
    if len(failures) > MAX_LISTED_FAILURES:
        logger.warning(f"  ... and {len(failures) - MAX_LISTED_FAILURES} more failures")


def log_operation(
    logger: logging.Logger,
    operation: str,
    item_key: str,
    status: str,
    **details: Any,
) -> None:
    """
    Log one entry write or skip.

    ``success`` logs at INFO, ``error`` at ERROR, anything else (skips) at
    DEBUG.
    """
    msg = f"[{operation.upper()}] {item_key} - {status}"
    if details:
        msg = f"{msg} ({_format_fields(details)})"

    if status == "success":
        logger.info(msg)
    elif status == "error":
        logger.error(msg)
    else:
        logger.debug(msg)


class PerformanceMonitor:
    """
    Context manager that logs how long a block took.

    Metadata may be updated inside the block and is printed on exit.

    Example:
        >>> with PerformanceMonitor(logger, "Gmail page 1") as monitor:
        ...     monitor.metadata["messages"] = len(ids)
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation_name: str,
        log_level: int = logging.DEBUG,
        **metadata: Any,
    ) -> None:
        self.logger = logger
        self.operation_name = operation_name
        self.log_level = log_level
        self.metadata = metadata
        self.elapsed: float | None = None
        self._started: float | None = None

    def __enter__(self) -> "PerformanceMonitor":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._started is None:
            return
        self.elapsed = time.perf_counter() - self._started

        msg = f"{self.operation_name} completed in {self.elapsed:.2f}s"
        if self.metadata:
            msg = f"{msg} ({_format_fields(self.metadata)})"
        self.logger.log(self.log_level, msg)


def enable_debug_logging() -> None:
    """Switch the root logger, its handlers and run loggers to DEBUG."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers:
        handler.setLevel(logging.DEBUG)

    for task_name in _run_loggers:
        logging.getLogger(f"gmail_order_status.tasks.{task_name}").setLevel(logging.DEBUG)


def initialize_logging(level: int | None = None) -> None:
    """Install the stderr console handler on the root logger."""
    level = level or get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).debug(
        f"Logging initialized at {logging.getLevelName(level)}; run logs in {LOG_DIR}"
    )
