"""
Structured logging for JobBoard.

Console and daily file output, key/value context appended as JSON,
and counters for recommendation and upload outcomes.
"""

import copy
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Logger wrapper with console/file handlers and outcome metrics.
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
        self.enable_file = enable_file
        self.enable_console = enable_console

        self.metrics = {
            "recommendations_requested": 0,
            "recommendations_served": 0,
            "recommendations_no_data": 0,
            "fetch_errors": 0,
            "uploads_attempted": 0,
            "uploads_failed": 0,
            "errors_by_type": {},
            "uploads_by_bucket": {},
        }

        self.configure(level, log_dir)

    def configure(self, level: str = "INFO", log_dir: Optional[Path] = None):
        """Replace handlers using a new level and log directory."""
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stderr)  # stdout is reserved for command output
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if self.enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file gets everything
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
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

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_recommendation_request(self):
        self.metrics["recommendations_requested"] += 1

    def record_recommendation_served(self):
        self.metrics["recommendations_served"] += 1

    def record_no_data(self):
        self.metrics["recommendations_no_data"] += 1

    def record_fetch_error(self, error_type: str):
        """Record an upstream fetch failure by exception type name."""
        self.metrics["fetch_errors"] += 1
        self._count_error(error_type)

    def record_upload_attempt(self, bucket: str):
        """Record an upload attempt against a bucket."""
        self.metrics["uploads_attempted"] += 1
        stats = self.metrics["uploads_by_bucket"].setdefault(
            bucket, {"attempts": 0, "failures": 0}
        )
        stats["attempts"] += 1

    def record_upload_failure(self, bucket: str, error_type: str):
        """Record a failed upload."""
        self.metrics["uploads_failed"] += 1
        if bucket in self.metrics["uploads_by_bucket"]:
            self.metrics["uploads_by_bucket"][bucket]["failures"] += 1
        self._count_error(error_type)

    def _count_error(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics, with per-bucket failure rates."""
        metrics_copy = copy.deepcopy(self.metrics)
        for bucket, stats in metrics_copy["uploads_by_bucket"].items():
            if stats["attempts"] > 0:
                stats["failure_rate"] = round(
                    stats["failures"] / stats["attempts"], 3
                )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        requested = metrics["recommendations_requested"]
        served = metrics["recommendations_served"]
        serve_rate = 0
        if requested > 0:
            serve_rate = round(served / requested * 100, 1)

        self.info("=== Session Metrics ===")
        self.info(f"Recommendations: {served}/{requested} served ({serve_rate}%)")
        self.info(f"No data: {metrics['recommendations_no_data']}")
        self.info(f"Fetch errors: {metrics['fetch_errors']}")

        if metrics["uploads_by_bucket"]:
            self.info("Uploads:")
            for bucket, stats in metrics["uploads_by_bucket"].items():
                self.info(f"  {bucket}: {stats['failures']}/{stats['attempts']} failed")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
