"""Rule engine match result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from cardclass.domain.classification.value_objects.account import Account
    from cardclass.domain.classification.value_objects.classification_rule import (
        ClassificationRule,
    )


@dataclass(frozen=True)
class RuleMatchResult:
    """Outcome of running the rule engine over one transaction."""

    matched: bool
    rule: Optional[ClassificationRule] = None
    account: Optional[Account] = None

    @classmethod
    def no_match(cls) -> RuleMatchResult:
        return cls(matched=False)

    @classmethod
    def of(cls, rule: ClassificationRule) -> RuleMatchResult:
        return cls(matched=True, rule=rule, account=rule.account)
