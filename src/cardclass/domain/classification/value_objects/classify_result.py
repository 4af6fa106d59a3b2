"""Classification result value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ClassificationMethod(Enum):
    """Which stage of the pipeline produced a classification."""

    RULE = "rule"
    AI = "ai"


@dataclass(frozen=True)
class ClassifyResult:
    """Final classification of a transaction, tagged with its provenance."""

    account_code: str
    account_name: str
    confidence: float  # 0.0 - 1.0
    reason: str
    method: ClassificationMethod
    rule_name: Optional[str] = None
    model_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            msg = f"Confidence must be between 0.0 and 1.0, got {self.confidence}"
            raise ValueError(msg)

    @property
    def is_from_rule(self) -> bool:
        return self.method == ClassificationMethod.RULE

    @property
    def is_from_ai(self) -> bool:
        return self.method == ClassificationMethod.AI

    def is_confident(self, threshold: float = 0.7) -> bool:
        return self.confidence >= threshold

    def to_dict(self) -> dict:
        return {
            "account_code": self.account_code,
            "account_name": self.account_name,
            "confidence": self.confidence,
            "reason": self.reason,
            "method": self.method.value,
        }
