"""
Structured logging for companystore.

Provides centralized logging with console and optional file output,
plus lightweight metrics on queries and repository operations.
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Callable, Optional
from datetime import datetime
import json

from .env import get_log_settings


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks query and operation counts for monitoring the data layer.
    """

    def __init__(
        self,
        name: str = "companystore",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "queries_executed": 0,
            "operations": {},
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"companystore_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_query(self):
        """Increment executed statement counter."""
        self.metrics["queries_executed"] += 1

    def record_operation(self, operation: str):
        """Record a call to a repository operation."""
        stats = self.metrics["operations"].setdefault(
            operation, {"calls": 0, "failures": 0}
        )
        stats["calls"] += 1

    def record_failure(self, operation: str, error_type: str):
        """Record a failed repository operation."""
        stats = self.metrics["operations"].setdefault(
            operation, {"calls": 0, "failures": 0}
        )
        stats["failures"] += 1

        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-operation failure rates."""
        metrics_copy = self.metrics.copy()
        metrics_copy["operations"] = {
            operation: dict(stats) for operation, stats in self.metrics["operations"].items()
        }
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        for operation, stats in metrics_copy["operations"].items():
            if stats["calls"] > 0:
                stats["failure_rate"] = round(stats["failures"] / stats["calls"], 3)

        return metrics_copy

    def log_metrics_summary(self, level: int = logging.INFO):
        """Log a summary of current metrics at the given level."""
        metrics = self.get_metrics()
        log = functools.partial(self._log, level, context={})

        log("=== Company Store Metrics ===")
        log(f"Queries executed: {metrics['queries_executed']}")

        if metrics["operations"]:
            log("Operations:")
            for operation, stats in metrics["operations"].items():
                rate = stats.get("failure_rate", 0) * 100
                log(f"  {operation}: {stats['calls']} calls, {stats['failures']} failed ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            log("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                log(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(**kwargs) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Settings come from the environment (see env.get_log_settings) unless
    overridden by keyword arguments on first creation.

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        settings = get_log_settings()
        settings.update(kwargs)
        _global_logger = StructuredLogger(**settings)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None


def track_operation(operation: str):
    """
    Decorator recording each call of a repository operation in the
    global logger metrics. Errors are counted by type and re-raised.

    Example:
        @track_operation("get")
        def get(self, handle):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            logger.record_operation(operation)
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.record_failure(operation, type(e).__name__)
                raise

        return wrapper
    return decorator
