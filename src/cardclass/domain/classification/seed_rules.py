"""Sample MCC rules for a typical Korean chart of accounts.

Each sample names its target by account code. Seeding maps the samples onto
a company's active accounts and skips samples whose code does not exist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from cardclass.domain.classification.value_objects import (
    Account,
    ClassificationRule,
    RuleConditions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleRule:
    name: str
    priority: int
    conditions: dict[str, Any]
    account_code: str


SAMPLE_RULES: tuple[SampleRule, ...] = (
    SampleRule(
        "카페/커피숍 → 복리후생비",
        10,
        {"mcc_codes": ["5814", "5812"], "merchant_name_contains": "스타벅스"},
        "51100",
    ),
    SampleRule(
        "음식점(회식) → 접대비",
        9,
        {"mcc_codes": ["5812", "5813"], "amount_min": 50000},
        "51400",
    ),
    SampleRule("주유소 → 차량유지비", 8, {"mcc_codes": ["5541", "5542"]}, "51900"),
    SampleRule(
        "항공사 → 여비교통비",
        7,
        {"mcc_codes": ["3000", "3001", "3002", "4511"]},
        "51200",
    ),
    SampleRule("호텔/숙박 → 여비교통비", 7, {"mcc_codes": ["7011", "7012"]}, "51200"),
    SampleRule("택시 → 여비교통비", 6, {"mcc_codes": ["4121"]}, "51200"),
    SampleRule("서점/도서 → 도서인쇄비", 5, {"mcc_codes": ["5942", "5192"]}, "52200"),
    SampleRule("사무용품점 → 사무용품비", 5, {"mcc_codes": ["5943", "5111"]}, "52300"),
    SampleRule(
        "다이소/소모품 → 소모품비",
        4,
        {"mcc_codes": ["5331"], "merchant_name_contains": "다이소"},
        "52400",
    ),
    SampleRule("통신요금 → 통신비", 4, {"mcc_codes": ["4814", "4812"]}, "51300"),
    SampleRule(
        "IT/소프트웨어 → 지급수수료",
        3,
        {"mcc_codes": ["7372", "7379"]},
        "52500",
    ),
    SampleRule("택배/운송 → 운반비", 3, {"mcc_codes": ["4215", "4214"]}, "52000"),
    SampleRule(
        "소액 카페 → 회의비",
        11,
        {"mcc_codes": ["5814"], "amount_max": 30000},
        "52700",
    ),
    SampleRule(
        "병원/의료 → 복리후생비",
        2,
        {"mcc_codes": ["8011", "8021", "8031"]},
        "51100",
    ),
    SampleRule("관공서/세금 → 세금과공과", 2, {"mcc_codes": ["9311", "9222"]}, "51500"),
)


@dataclass
class SeedResult:
    """Outcome of mapping the sample rules onto a set of accounts."""

    rules: list[ClassificationRule] = field(default_factory=list)
    skipped: list[SampleRule] = field(default_factory=list)

    @property
    def created(self) -> int:
        return len(self.rules)

    @property
    def total(self) -> int:
        return len(self.rules) + len(self.skipped)


def build_seed_rules(
    accounts: Iterable[Account],
    samples: Iterable[SampleRule] = SAMPLE_RULES,
) -> SeedResult:
    by_code = {account.code: account for account in accounts if account.is_active}
    result = SeedResult()

    for sample in samples:
        account = by_code.get(sample.account_code)
        if account is None:
            logger.debug(
                "Skipping sample rule '%s': account %s not found",
                sample.name,
                sample.account_code,
            )
            result.skipped.append(sample)
            continue

        result.rules.append(
            ClassificationRule(
                name=sample.name,
                priority=sample.priority,
                conditions=RuleConditions.from_dict(sample.conditions),
                account=account,
            ),
        )

    logger.info(
        "Seed rules: %d created, %d skipped", result.created, len(result.skipped)
    )
    return result
