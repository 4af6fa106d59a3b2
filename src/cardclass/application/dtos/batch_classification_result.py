"""DTOs for batch classification results."""

from dataclasses import dataclass, field
from typing import Optional

from cardclass.domain.classification.value_objects import (
    CardTransaction,
    ClassifyResult,
)


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of classifying one transaction of a batch (rows start at 1)."""

    row: int
    transaction: CardTransaction
    result: Optional[ClassifyResult] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class BatchItemError:
    """A failed row, as reported to the operator."""

    row: int
    error: str
    error_code: Optional[str] = None


@dataclass
class BatchClassificationResult:
    """Aggregate result of classifying a batch of transactions."""

    total: int = 0
    success: int = 0
    failed: int = 0
    rule_classified: int = 0
    ai_classified: int = 0

    items: list[BatchItemResult] = field(default_factory=list)
    errors: list[BatchItemError] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.success + self.failed

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.success / self.total

    def add_item(self, item: BatchItemResult) -> None:
        self.items.append(item)
        if item.result is not None:
            self.success += 1
            if item.result.is_from_rule:
                self.rule_classified += 1
            else:
                self.ai_classified += 1
            return

        self.failed += 1
        self.errors.append(
            BatchItemError(
                row=item.row,
                error=item.error or "unknown error",
                error_code=item.error_code,
            ),
        )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "success": self.success,
            "failed": self.failed,
            "rule_classified": self.rule_classified,
            "ai_classified": self.ai_classified,
            "errors": [
                {"row": e.row, "error": e.error, "error_code": e.error_code}
                for e in self.errors
            ],
        }
