"""Logging pipeline: console plus optional queued file output."""

from __future__ import annotations

import json
import logging
import os
import queue
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

__all__ = [
    "JsonFormatter",
    "LoggingConfig",
    "build_logging_config",
    "configure_logging",
    "setup_logging",
]

_QUEUE_LISTENER: QueueListener | None = None
_TEXT_FORMATTER = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Console format plus an optional JSON-lines log file."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields land under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(config: LoggingConfig) -> None:
    """Replace root handlers; a configured file is written through a queue listener."""
    global _QUEUE_LISTENER

    if _QUEUE_LISTENER is not None:
        _QUEUE_LISTENER.stop()
        _QUEUE_LISTENER = None

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, config.level_name.upper(), logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter() if config.console_format == "json" else _TEXT_FORMATTER)
    if not config.file_path:
        root.addHandler(console)
        return

    log_file = Path(config.file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
    file_handler.setFormatter(JsonFormatter())

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(log_queue))
    _QUEUE_LISTENER = QueueListener(log_queue, console, file_handler, respect_handler_level=True)
    _QUEUE_LISTENER.start()


def build_logging_config() -> LoggingConfig:
    """Resolve logging config from ``GRIDTECH_LOG_LEVEL``/``LOG_LEVEL``, ``LOG_FORMAT`` and ``GRIDTECH_LOG_FILE``."""
    level_name = os.getenv("GRIDTECH_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    console_format = os.getenv("LOG_FORMAT", "text").strip().lower()
    file_path = os.getenv("GRIDTECH_LOG_FILE", "").strip() or None
    return LoggingConfig(level_name=level_name, console_format=console_format, file_path=file_path)


def setup_logging() -> None:
    """Configure logging from the environment."""
    config = build_logging_config()
    configure_logging(config)
    if config.file_path:
        logging.getLogger(__name__).info("logging_file=%s", config.file_path)
