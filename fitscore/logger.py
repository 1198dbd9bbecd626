"""
Structured logging for fitscore.

Wraps the standard logging module with JSON-serialized context and a
small set of counters describing scoring and collaborator health.
"""

import json
import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Logger with console and optional file output.
    Tracks scoring and explanation metrics; safe to share across threads.
    """

    def __init__(
        self,
        name: str = "fitscore",
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
            enable_file: Write logs to a dated file under log_dir
            enable_console: Output logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self._lock = threading.Lock()
        self.metrics = {
            "candidates_scored": 0,
            "scoring_failures": 0,
            "collaborator_calls": 0,
            "collaborator_failures": 0,
            "fallback_explanations": 0,
            "reclassifications": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
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

            log_file = log_dir / f"fitscore_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
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

    def _bump(self, key: str, amount: int = 1):
        with self._lock:
            self.metrics[key] += amount

    def record_scored(self):
        """Count a candidate whose numeric scores were produced."""
        self._bump("candidates_scored")

    def record_scoring_failure(self, error_type: str):
        """Count a candidate that failed before producing scores."""
        with self._lock:
            self.metrics["scoring_failures"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def record_collaborator_call(self):
        self._bump("collaborator_calls")

    def record_collaborator_failure(self, error_type: str):
        """Count a failed explanation request and the fallback that replaced it."""
        with self._lock:
            self.metrics["collaborator_failures"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def record_fallback(self):
        self._bump("fallback_explanations")

    def record_reclassification(self, count: int):
        """Count candidates relabelled by a threshold change."""
        self._bump("reclassifications", count)

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics with derived rates."""
        with self._lock:
            snapshot = dict(self.metrics)
            snapshot["errors_by_type"] = dict(self.metrics["errors_by_type"])

        calls = snapshot["collaborator_calls"]
        if calls > 0:
            snapshot["collaborator_success_rate"] = round(
                (calls - snapshot["collaborator_failures"]) / calls, 3
            )
        return snapshot

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Scoring Session Metrics ===")
        self.info(f"Candidates scored: {metrics['candidates_scored']}")
        self.info(f"Scoring failures: {metrics['scoring_failures']}")
        self.info(
            f"Explanations: {metrics['collaborator_calls']} requested, "
            f"{metrics['fallback_explanations']} fallback"
        )
        if metrics["reclassifications"]:
            self.info(f"Reclassified: {metrics['reclassifications']}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "fitscore",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level; defaults to FITSCORE_LOG_LEVEL
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            from .config import LOG_LEVEL
            level = LOG_LEVEL
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
