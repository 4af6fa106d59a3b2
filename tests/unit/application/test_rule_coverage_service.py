"""Tests for rule coverage analysis."""

from decimal import Decimal

from cardclass.application.services import analyze_rule_coverage
from cardclass.domain.classification.value_objects import (
    Account,
    CardTransaction,
    ClassificationRule,
    RuleConditions,
)

FUEL = Account(code="51900", name="차량유지비")
TRAVEL = Account(code="51200", name="여비교통비")


def create_rule(name, account, priority=0, **conditions) -> ClassificationRule:
    return ClassificationRule(
        name=name,
        conditions=RuleConditions.from_dict(conditions),
        account=account,
        priority=priority,
    )


def create_transaction(merchant: str, mcc: str) -> CardTransaction:
    return CardTransaction(amount=Decimal("50000"), merchant_name=merchant, mcc_code=mcc)


class TestAnalyzeRuleCoverage:
    def test_counts_hits_and_unmatched(self):
        rules = [
            create_rule("주유소", FUEL, priority=8, mcc_codes=["5541", "5542"]),
            create_rule("택시", TRAVEL, priority=6, mcc_codes=["4121"]),
        ]
        transactions = [
            create_transaction("GS칼텍스", "5541"),
            create_transaction("현대오일뱅크", "5542"),
            create_transaction("카카오택시", "4121"),
            create_transaction("삼성SDS", "7372"),
        ]

        report = analyze_rule_coverage(rules, transactions)

        assert report.total == 4
        assert report.matched == 3
        assert report.hits_by_rule == {"주유소": 2, "택시": 1}
        assert [tx.merchant_name for tx in report.unmatched] == ["삼성SDS"]
        assert report.coverage == 0.75

    def test_rules_sorted_by_priority_before_matching(self):
        rules = [
            create_rule("generic", TRAVEL, priority=1, mcc_codes=["5541"]),
            create_rule("specific", FUEL, priority=9, mcc_codes=["5541"]),
        ]

        report = analyze_rule_coverage(rules, [create_transaction("S-Oil", "5541")])

        assert report.hits_by_rule == {"specific": 1, "generic": 0}

    def test_empty_sample(self):
        report = analyze_rule_coverage([], [])

        assert report.coverage == 0.0
        assert report.to_dict()["unmatched"] == []

    def test_to_dict(self):
        report = analyze_rule_coverage([], [create_transaction("삼성SDS", "7372")])

        assert report.to_dict() == {
            "total": 1,
            "matched": 0,
            "coverage": 0.0,
            "hits_by_rule": {},
            "unmatched": [
                {"merchant_name": "삼성SDS", "mcc_code": "7372", "amount": "50000"},
            ],
        }
