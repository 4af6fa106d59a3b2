"""Batch classification progress events for streaming."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from cardclass.application.dtos.batch_classification_result import (
    BatchClassificationResult,
)


class BatchEventType(str, Enum):
    """Types of batch classification events."""

    STARTED = "classification_started"
    PROGRESS = "classification_progress"
    COMPLETED = "classification_completed"


@dataclass
class BatchProgressEvent:
    """Base class for batch progress events."""

    event_type: BatchEventType
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class BatchClassificationStartedEvent(BatchProgressEvent):
    """Emitted when batch classification begins."""

    total: int = 0

    def __init__(self, total: int, message: Optional[str] = None):
        super().__init__(
            event_type=BatchEventType.STARTED,
            message=message or f"Classifying {total} transaction(s)",
        )
        self.total = total

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["total"] = self.total
        return d


@dataclass
class BatchClassificationProgressEvent(BatchProgressEvent):
    """Emitted after each concurrent group completes."""

    current: int = 0
    total: int = 0
    success: int = 0
    failed: int = 0

    def __init__(  # NOQA: PLR0913
        self,
        current: int,
        total: int,
        success: int,
        failed: int,
        message: Optional[str] = None,
    ):
        super().__init__(
            event_type=BatchEventType.PROGRESS,
            message=message or f"Classified {current}/{total}",
        )
        self.current = current
        self.total = total
        self.success = success
        self.failed = failed

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["current"] = self.current
        d["total"] = self.total
        d["success"] = self.success
        d["failed"] = self.failed
        return d


@dataclass
class BatchClassificationCompletedEvent(BatchProgressEvent):
    """Emitted once when the batch finishes, carrying the full result."""

    result: Optional[BatchClassificationResult] = None
    processing_time_ms: int = 0

    def __init__(
        self,
        result: BatchClassificationResult,
        processing_time_ms: int,
        message: Optional[str] = None,
    ):
        super().__init__(
            event_type=BatchEventType.COMPLETED,
            message=message
            or (
                f"Classification complete: {result.success} succeeded, "
                f"{result.failed} failed"
            ),
        )
        self.result = result
        self.processing_time_ms = processing_time_ms

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.result is not None:
            d.update(self.result.to_dict())
        d["processing_time_ms"] = self.processing_time_ms
        return d
