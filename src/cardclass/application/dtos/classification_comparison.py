"""DTOs for side-by-side AI classification comparisons."""

from dataclasses import dataclass, field
from typing import Optional

from cardclass.application.dtos.batch_classification_result import BatchItemResult
from cardclass.domain.classification.value_objects import (
    CardTransaction,
    PromptTemplates,
)


@dataclass(frozen=True)
class ComparisonSide:
    """One arm of a comparison.

    Unset fields fall back to the shared classification context, so two
    sides can differ by model, by prompt templates, or both.
    """

    label: str
    model_id: Optional[str] = None
    templates: Optional[PromptTemplates] = None


@dataclass(frozen=True)
class ComparisonRow:
    """Both sides' outcomes for one transaction (rows start at 1)."""

    row: int
    transaction: CardTransaction
    left: BatchItemResult
    right: BatchItemResult

    @property
    def agrees(self) -> bool:
        # A failed side never agrees
        if self.left.result is None or self.right.result is None:
            return False
        return self.left.result.account_code == self.right.result.account_code


@dataclass
class ClassificationComparisonReport:
    """Agreement between two sides over the same transactions."""

    left_label: str
    right_label: str
    rows: list[ComparisonRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def agreed(self) -> int:
        return sum(1 for row in self.rows if row.agrees)

    @property
    def agreement_rate(self) -> float:
        if not self.rows:
            return 0.0
        return self.agreed / self.total

    @property
    def disagreements(self) -> list[ComparisonRow]:
        return [row for row in self.rows if not row.agrees]

    def to_dict(self) -> dict:
        return {
            "left": self.left_label,
            "right": self.right_label,
            "total": self.total,
            "agreed": self.agreed,
            "agreement_rate": round(self.agreement_rate, 4),
            "disagreements": [
                {
                    "row": row.row,
                    "merchant_name": row.transaction.merchant_name,
                    "amount": str(row.transaction.amount),
                    "left": _side_to_dict(row.left),
                    "right": _side_to_dict(row.right),
                }
                for row in self.disagreements
            ],
        }


def _side_to_dict(item: BatchItemResult) -> dict:
    if item.result is None:
        return {"error": item.error, "error_code": item.error_code}
    return {
        "account_code": item.result.account_code,
        "account_name": item.result.account_name,
        "confidence": item.result.confidence,
        "reason": item.result.reason,
    }
