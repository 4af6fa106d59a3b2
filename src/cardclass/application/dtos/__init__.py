"""Application layer DTOs."""

from cardclass.application.dtos.batch_classification_result import (
    BatchClassificationResult,
    BatchItemError,
    BatchItemResult,
)
from cardclass.application.dtos.batch_progress import (
    BatchClassificationCompletedEvent,
    BatchClassificationProgressEvent,
    BatchClassificationStartedEvent,
    BatchEventType,
    BatchProgressEvent,
)
from cardclass.application.dtos.classification_comparison import (
    ClassificationComparisonReport,
    ComparisonRow,
    ComparisonSide,
)

__all__ = [
    "BatchClassificationCompletedEvent",
    "BatchClassificationProgressEvent",
    "BatchClassificationResult",
    "BatchClassificationStartedEvent",
    "BatchEventType",
    "BatchItemError",
    "BatchItemResult",
    "BatchProgressEvent",
    "ClassificationComparisonReport",
    "ComparisonRow",
    "ComparisonSide",
]
