"""
Structured logging for the job board service.

Wraps stdlib logging with console and file outputs, key/value context
on each message, and simple request metrics for the HTTP layer.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks request metrics for monitoring API health.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        # metrics are updated from threadpool workers
        self._metrics_lock = threading.Lock()
        self.metrics = {
            "requests_total": 0,
            "responses_by_status": {},
            "errors_by_type": {},
            "outcomes": {},
        }
        self.configure(level, log_dir, enable_file, enable_console)

    def configure(
        self,
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """Replace level and handlers in place; metrics are kept."""
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file always gets everything
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_request(self, method: str, status_code: int):
        """Count a handled request under its status class (2xx, 4xx, ...)."""
        bucket = f"{status_code // 100}xx"
        with self._metrics_lock:
            self.metrics["requests_total"] += 1
            by_status = self.metrics["responses_by_status"]
            by_status[bucket] = by_status.get(bucket, 0) + 1

    def record_error(self, error_type: str):
        with self._metrics_lock:
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def record_outcome(self, entity: str, outcome: str):
        """Count a service outcome such as job/created or skill/removed."""
        key = f"{entity}/{outcome}"
        with self._metrics_lock:
            outcomes = self.metrics["outcomes"]
            outcomes[key] = outcomes.get(key, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics with the error rate filled in."""
        with self._metrics_lock:
            metrics_copy = {
                k: (dict(v) if isinstance(v, dict) else v) for k, v in self.metrics.items()
            }
        total = metrics_copy["requests_total"]
        failed = sum(
            count for bucket, count in metrics_copy["responses_by_status"].items()
            if bucket == "5xx"
        )
        metrics_copy["server_error_rate"] = round(failed / total, 3) if total else 0.0
        return metrics_copy

    def log_metrics_summary(self):
        metrics = self.get_metrics()

        self.info("=== Request Metrics ===")
        self.info(f"Requests: {metrics['requests_total']} "
                  f"({metrics['server_error_rate'] * 100:.1f}% server errors)")

        if metrics["responses_by_status"]:
            self.info("Responses:")
            for bucket, count in sorted(metrics["responses_by_status"].items()):
                self.info(f"  {bucket}: {count}")

        if metrics["outcomes"]:
            self.info("Outcomes:")
            for key, count in sorted(metrics["outcomes"].items()):
                self.info(f"  {key}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Arguments only take effect on the first call; later calls return the
    existing instance. File output is off unless requested, use
    configure() on the instance to change handlers afterwards.
    """
    global _global_logger

    if _global_logger is None:
        kwargs.setdefault("enable_file", False)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
