"""
Leveled application logger on top of the standard logging module.

Console output always happens. In production the same lines are appended
to ``combined.log`` (info and above) and ``error.log`` (errors only).
Debug lines are only emitted when the configured minimum level allows it,
which is the case in development.

Example:
    from common.logger import LoggerConfig, configure_logging, get_logger

    configure_logging(LoggerConfig(min_level="debug"))
    logger = get_logger(__name__)
    logger.success("Message sent", meta={"receiver": receiver_id})
"""

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": SUCCESS,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUCCESS: "SUCCESS",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

ERROR_LOG_NAME = "error.log"
COMBINED_LOG_NAME = "combined.log"


@dataclass(frozen=True)
class LoggerConfig:
    """Explicit logger configuration, built once at startup."""

    min_level: str = "info"
    persist_to_disk: bool = False
    log_dir: str = "logs"

    @classmethod
    def from_settings(cls, settings) -> "LoggerConfig":
        """Derive logger behaviour from the runtime mode in settings."""
        return cls(
            min_level="debug" if settings.is_development() else "info",
            persist_to_disk=settings.is_production(),
            log_dir=getattr(settings, "LOG_DIR", "logs"),
        )

    @property
    def level(self) -> int:
        try:
            return LEVELS[self.min_level.lower()]
        except KeyError:
            raise ValueError(f"Unknown log level: {self.min_level}")


class LineFormatter(logging.Formatter):
    """Formats ``[ISO-timestamp] [LEVEL] message {meta}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        iso = timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        label = _LEVEL_LABELS.get(record.levelno, record.levelname)

        line = f"[{iso}] [{label}] {record.getMessage()}"

        meta = getattr(record, "meta", None)
        if meta:
            line = f"{line} {json.dumps(meta, default=str)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"

        return line


class AppendFileHandler(logging.Handler):
    """
    Appends each record to a file, opening and closing it per write.

    Write failures are reported on the console and never reach the caller.
    """

    def __init__(self, path: Path, level: int = logging.NOTSET, fallback: Optional[TextIO] = None):
        super().__init__(level)
        self.path = Path(path)
        self._fallback = fallback

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except Exception:
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        stream = self._fallback or sys.stderr
        try:
            stream.write(f"Failed to write to log file {self.path}: {exc}\n")
            stream.flush()
        except Exception:
            pass


class AppLogger(logging.LoggerAdapter):
    """
    Logger adapter exposing ``success`` and ``warn`` plus structured metadata.

    Metadata is passed as ``meta={...}`` and rendered as JSON after the message.
    """

    def process(self, msg, kwargs):
        meta = kwargs.pop("meta", None)
        if meta:
            extra = dict(kwargs.get("extra") or {})
            extra["meta"] = meta
            kwargs["extra"] = extra
        return msg, kwargs

    def success(self, msg, *args, **kwargs) -> None:
        self.log(SUCCESS, msg, *args, **kwargs)

    def warn(self, msg, *args, **kwargs) -> None:
        self.warning(msg, *args, **kwargs)


_CONFIGURED_HANDLERS: List[logging.Handler] = []


def configure_logging(
    config: LoggerConfig,
    target: Optional[logging.Logger] = None,
    stream: Optional[TextIO] = None,
) -> List[logging.Handler]:
    """
    Attach console and (optionally) file handlers.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        config: Logger configuration
        target: Logger to configure (root logger by default)
        stream: Console stream (stderr by default)

    Returns:
        The handlers that were installed
    """
    target = target if target is not None else logging.getLogger()

    for handler in _CONFIGURED_HANDLERS:
        for logger in (target, logging.getLogger()):
            if handler in logger.handlers:
                logger.removeHandler(handler)
    _CONFIGURED_HANDLERS.clear()

    formatter = LineFormatter()
    console_stream = stream or sys.stderr

    console = logging.StreamHandler(console_stream)
    console.setLevel(config.level)
    console.setFormatter(formatter)
    handlers: List[logging.Handler] = [console]

    if config.persist_to_disk:
        log_dir = Path(config.log_dir)
        combined = AppendFileHandler(
            log_dir / COMBINED_LOG_NAME,
            level=max(config.level, logging.INFO),
            fallback=console_stream,
        )
        errors = AppendFileHandler(
            log_dir / ERROR_LOG_NAME,
            level=logging.ERROR,
            fallback=console_stream,
        )
        for handler in (combined, errors):
            handler.setFormatter(formatter)
            handlers.append(handler)

    for handler in handlers:
        target.addHandler(handler)
    target.setLevel(config.level)

    _CONFIGURED_HANDLERS.extend(handlers)
    return handlers


def get_logger(name: str) -> AppLogger:
    """Get an application logger for a module."""
    return AppLogger(logging.getLogger(name), {})
