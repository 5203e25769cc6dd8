"""Run instrumentation metrics.

Track per-run totals of a batch run:
- Dots generated
- Generation units that failed
- Units skipped for zero-area geometry
- Wall-clock generation time

Stored as structured MetricEvent objects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from dotdensity.models.common import new_uuid7, utc_now


class MetricType(StrEnum):
    """Batch run metric types."""

    DOTS_GENERATED = "DOTS_GENERATED"
    FEATURES_FAILED = "FEATURES_FAILED"
    DEGENERATE_FEATURES = "DEGENERATE_FEATURES"
    GENERATION_TIME = "GENERATION_TIME"


@dataclass
class MetricEvent:
    """Structured metric event for one batch run."""

    run_id: UUID
    metric_type: MetricType
    value: float
    unit: str
    event_id: UUID = field(default_factory=new_uuid7)
    timestamp: datetime = field(default_factory=utc_now)
    metadata: dict = field(default_factory=dict)


class MetricsStore:
    """In-memory metrics store."""

    def __init__(self) -> None:
        self._events: list[MetricEvent] = []

    def record(self, event: MetricEvent) -> None:
        """Record a metric event."""
        self._events.append(event)

    def get_all(self) -> list[MetricEvent]:
        """Get all recorded events."""
        return list(self._events)

    def get_by_run(self, run_id: UUID) -> list[MetricEvent]:
        """Get events for a specific run."""
        return [e for e in self._events if e.run_id == run_id]

    def get_by_type(self, metric_type: MetricType) -> list[MetricEvent]:
        """Get events of a specific metric type."""
        return [e for e in self._events if e.metric_type == metric_type]

    def total_by_type(self, metric_type: MetricType) -> float:
        """Sum of values for a metric type. Returns 0.0 if empty."""
        return sum(e.value for e in self.get_by_type(metric_type))

    def average_by_type(self, metric_type: MetricType) -> float:
        """Compute average value for a metric type. Returns 0.0 if empty."""
        events = self.get_by_type(metric_type)
        if not events:
            return 0.0
        return sum(e.value for e in events) / len(events)
