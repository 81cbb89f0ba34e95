"""
Logger module - Leveled console/file logging driven by explicit configuration.
"""

from common.logger.logger import (
    SUCCESS,
    LoggerConfig,
    LineFormatter,
    AppendFileHandler,
    AppLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "SUCCESS",
    "LoggerConfig",
    "LineFormatter",
    "AppendFileHandler",
    "AppLogger",
    "configure_logging",
    "get_logger",
]
