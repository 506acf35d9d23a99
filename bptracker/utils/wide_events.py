"""
Wide Events (Canonical Log Lines) for analytics runs

One JSON event per insight-generation run or statistics request:
- High-cardinality context (request id, date range, caller id)
- Business metrics (records analysed, insights produced by type)
- Per-branch timings (exercise, diet, medication, trend, predictive)
- Tail sampling: failures, slow runs and runs that surface a crisis-level
  reading or a negative insight are always kept
"""

import random
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from bptracker.config import Config

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Business metrics that force emission regardless of sampling
CRITICAL_METRICS = (
    "negative_insights",
    "crisis_readings",
)

SLOW_RUN_THRESHOLD_MS = 1000


class WideEvent:
    """
    Accumulates context for one analytics run, then emits a single log event.

    Usage:
        event = WideEvent("insight_generation")
        event.add_context(bp_readings=42)
        event.record_timing("exercise", 1.2)
        event.add_business_metric("insights", 3)
        event.emit()
    """

    def __init__(self, operation: str, request_id: Optional[str] = None):
        self.operation = operation
        self.context: Dict[str, Any] = {
            "operation": operation,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "start_time": time.time(),
            "request_id": request_id or str(uuid.uuid4()),
        }
        self.logger = structlog.get_logger()

    def add_context(self, **kwargs) -> "WideEvent":
        """Add high-cardinality context fields."""
        self.context.update(kwargs)
        return self

    def add_business_metric(self, key: str, value: Any) -> "WideEvent":
        """Add business metrics (records analysed, insights produced)."""
        self.context.setdefault("business_metrics", {})[key] = value
        return self

    def add_error(self, error: Exception, **kwargs) -> "WideEvent":
        self.context["error"] = {
            "type": type(error).__name__,
            "message": str(error),
            "details": kwargs,
        }
        self.context["success"] = False
        return self

    def mark_success(self) -> "WideEvent":
        self.context["success"] = True
        return self

    def mark_failure(self, reason: str) -> "WideEvent":
        self.context["success"] = False
        self.context["failure_reason"] = reason
        return self

    def record_timing(self, step: str, duration_ms: float) -> "WideEvent":
        """
        Record how long one analysis branch took.

        Outputs: {"performance_breakdown": {"exercise_ms": 1.2, "diet_ms": 0.8}}
        """
        self.context.setdefault("performance_breakdown", {})[f"{step}_ms"] = round(duration_ms, 2)
        return self

    def set_duration(self) -> "WideEvent":
        if "start_time" in self.context:
            duration_ms = (time.time() - self.context["start_time"]) * 1000
            self.context["duration_ms"] = round(duration_ms, 2)
            del self.context["start_time"]
        return self

    def should_emit(
        self,
        sample_rate: float = Config.WIDE_EVENT_SAMPLE_RATE,
        slow_threshold_ms: float = SLOW_RUN_THRESHOLD_MS
    ) -> bool:
        """
        Tail sampling:
        - Always emit failures
        - Always emit slow runs
        - Always emit runs with a critical business metric set
        - Sample the rest at sample_rate
        """
        if not self.context.get("success", True):
            return True

        if self.context.get("duration_ms", 0) > slow_threshold_ms:
            return True

        business_metrics = self.context.get("business_metrics", {})
        if any(business_metrics.get(metric) for metric in CRITICAL_METRICS):
            return True

        return random.random() < sample_rate

    def emit(self, level: str = "info", force: bool = False) -> None:
        """
        Emit the event as one log line.

        Args:
            level: Log level (info, warning, error)
            force: Skip tail sampling
        """
        self.set_duration()

        if not force and not self.should_emit():
            return

        log_method = getattr(self.logger, level, self.logger.info)
        log_method(f"{self.operation}_complete", **self.context)


@contextmanager
def track_operation(operation: str, force: bool = False, **initial_context):
    """
    Track an operation with a wide event that is emitted on exit.

    Failures are always emitted; successful runs go through tail sampling
    unless ``force`` is set.

    Usage:
        with track_operation("insight_generation", bp_readings=42) as event:
            event.add_business_metric("insights", 3)
    """
    event = WideEvent(operation)
    event.add_context(**initial_context)

    try:
        yield event
        event.mark_success()
    except Exception as e:
        event.add_error(e)
        event.mark_failure(str(e))
        raise
    finally:
        failed = not event.context.get("success", True)
        event.emit(level="error" if failed else "info", force=force or failed)


def log_statistics_request(endpoint: str, sample_size: int, success: bool, **kwargs) -> None:
    """Log one statistics API call."""
    event = WideEvent(f"statistics_{endpoint}")
    event.add_context(**kwargs)
    event.add_business_metric("sample_size", sample_size)

    if success:
        event.mark_success()
    else:
        event.mark_failure(kwargs.get("error", "Unknown error"))

    event.emit()
