"""Rule coverage analysis.

Runs the rule engine over a sample of transactions to show how much of the
volume rules would settle without calling a model.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from cardclass.domain.classification.services import match_transaction, sort_rules
from cardclass.domain.classification.value_objects import (
    CardTransaction,
    ClassificationRule,
)


@dataclass
class RuleCoverageReport:
    """How many sample transactions the active rules would classify."""

    total: int = 0
    matched: int = 0
    hits_by_rule: dict[str, int] = field(default_factory=dict)
    unmatched: list[CardTransaction] = field(default_factory=list)

    @property
    def coverage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.matched / self.total

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "matched": self.matched,
            "coverage": round(self.coverage, 4),
            "hits_by_rule": dict(self.hits_by_rule),
            "unmatched": [
                {
                    "merchant_name": tx.merchant_name,
                    "mcc_code": tx.mcc_code,
                    "amount": str(tx.amount),
                }
                for tx in self.unmatched
            ],
        }


def analyze_rule_coverage(
    rules: Iterable[ClassificationRule],
    transactions: Sequence[CardTransaction],
) -> RuleCoverageReport:
    ordered = sort_rules(rules)
    report = RuleCoverageReport(
        total=len(transactions),
        hits_by_rule={rule.name: 0 for rule in ordered},
    )

    for tx in transactions:
        match = match_transaction(ordered, tx)
        if match.rule is None:
            report.unmatched.append(tx)
            continue
        report.matched += 1
        report.hits_by_rule[match.rule.name] += 1

    return report
