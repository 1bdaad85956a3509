"""
logger.py - Structured logging for the detection pipeline
==========================================================
Keeps a structured record of every pipeline step and forwards it to the
standard ``logging`` logger ``shape_brain``.

Features:
    - Pipeline step logging with timing
    - Structured data attachment
    - JSON serialization of entries
    - Per-stage duration metrics
"""

from __future__ import annotations

import json
import logging
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, Iterator, Optional


LOGGER_NAME = "shape_brain"

# Recent error/warning messages kept in the metrics; counts are exact.
MAX_METRIC_MESSAGES = 100


class PipelineStage(Enum):
    """Pipeline component identifiers for structured logging."""

    PIPELINE = "PIPELINE"
    BINARIZE = "BINARIZE"
    BLOBS = "BLOBS"
    CONTOUR = "CONTOUR"
    CLASSIFY = "CLASSIFY"
    IO = "IO"
    BATCH = "BATCH"


@dataclass
class LogEntry:
    """Structured log entry with metadata."""

    timestamp: str
    level: str
    component: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    duration_ms: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


@dataclass
class PerformanceMetrics:
    """Durations and counters collected over the logger's lifetime."""

    step_durations: Dict[str, float] = field(default_factory=dict)
    images_processed: int = 0
    error_count: int = 0
    warning_count: int = 0
    errors: Deque[str] = field(default_factory=lambda: deque(maxlen=MAX_METRIC_MESSAGES))
    warnings: Deque[str] = field(default_factory=lambda: deque(maxlen=MAX_METRIC_MESSAGES))


class PipelineLogger:
    """
    Structured logger shared by the pipeline components.

    Usage:
        logger = PipelineLogger()
        logger.step(PipelineStage.BLOBS, "Found blobs", count=3)

        with logger.timed_step(PipelineStage.BINARIZE, "Binarizing"):
            grid = binarizer.binarize(buffer)
    """

    LEVELS = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }

    def __init__(self, name: str = LOGGER_NAME, keep_entries: bool = True, max_entries: int = 10_000):
        """
        Args:
            name: Name of the underlying ``logging`` logger
            keep_entries: Keep structured entries in memory
            max_entries: Oldest entries are dropped past this count
        """
        self._logger = logging.getLogger(name)
        self.keep_entries = keep_entries
        self.max_entries = max_entries
        self.entries: Deque[LogEntry] = deque(maxlen=max_entries)
        self.metrics = PerformanceMetrics()

    def step(self, component: PipelineStage, message: str, **data: Any) -> None:
        self._emit("INFO", component, message, data)

    def debug(self, component: PipelineStage, message: str, **data: Any) -> None:
        # Per-blob decisions; skipped entirely unless DEBUG is enabled.
        if self._logger.isEnabledFor(logging.DEBUG):
            self._emit("DEBUG", component, message, data)

    def warning(self, component: PipelineStage, message: str, **data: Any) -> None:
        self.metrics.warning_count += 1
        self.metrics.warnings.append(message)
        self._emit("WARNING", component, message, data)

    def error(self, component: PipelineStage, message: str, exception: Optional[Exception] = None, **data: Any) -> None:
        if exception is not None:
            data["exception_type"] = type(exception).__name__
            data["exception_message"] = str(exception)
        self.metrics.error_count += 1
        self.metrics.errors.append(message)
        self._emit("ERROR", component, message, data)

    @contextmanager
    def timed_step(self, component: PipelineStage, message: str, **data: Any) -> Iterator[None]:
        """
        Context manager timing a step.

        Usage:
            with logger.timed_step(PipelineStage.CONTOUR, "Tracing contours"):
                ...
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            key = component.value.lower()
            self.metrics.step_durations[key] = self.metrics.step_durations.get(key, 0.0) + duration_ms
            if self._logger.isEnabledFor(logging.DEBUG):
                self._emit("DEBUG", component, f"{message} completed in {duration_ms:.1f}ms", data, duration_ms)

    def _emit(
        self,
        level: str,
        component: PipelineStage,
        message: str,
        data: Dict[str, Any],
        duration_ms: Optional[float] = None,
    ) -> None:
        if self.keep_entries:
            self.entries.append(
                LogEntry(
                    timestamp=datetime.now().isoformat(),
                    level=level,
                    component=component.value,
                    message=message,
                    data=data,
                    duration_ms=duration_ms,
                )
            )

        levelno = self.LEVELS[level]
        if self._logger.isEnabledFor(levelno):
            suffix = f" {json.dumps(data, default=str)}" if data else ""
            self._logger.log(levelno, "[%s] %s%s", component.value, message, suffix)

    def get_metrics_summary(self) -> Dict[str, Any]:
        return {
            "total_entries": len(self.entries),
            "images_processed": self.metrics.images_processed,
            "step_durations": dict(self.metrics.step_durations),
            "error_count": self.metrics.error_count,
            "warning_count": self.metrics.warning_count,
        }

    def clear(self) -> None:
        """Clear all entries and reset metrics."""
        self.entries.clear()
        self.metrics = PerformanceMetrics()


def configure_logging(verbose: bool = False) -> None:
    """Console logging setup used by the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s %(message)s",
    )


__all__ = [
    "LOGGER_NAME",
    "MAX_METRIC_MESSAGES",
    "PipelineStage",
    "LogEntry",
    "PerformanceMetrics",
    "PipelineLogger",
    "configure_logging",
]
