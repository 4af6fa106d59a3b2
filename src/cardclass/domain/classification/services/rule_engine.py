"""Deterministic rule engine.

First match wins. Rules must arrive sorted by priority descending; among
rules of equal priority the caller's order decides, so callers sort with a
stable key before invoking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cardclass.domain.classification.value_objects import (
    CardTransaction,
    ClassificationRule,
    RuleMatchResult,
)

logger = logging.getLogger(__name__)


def match_transaction(
    rules: Iterable[ClassificationRule],
    transaction: CardTransaction,
) -> RuleMatchResult:
    for rule in rules:
        # Input is pre-filtered to active rules; skip stragglers anyway
        if not rule.is_active:
            continue
        if rule.conditions.matches(transaction):
            logger.debug("Rule '%s' matched %s", rule.name, transaction)
            return RuleMatchResult.of(rule)

    return RuleMatchResult.no_match()


def sort_rules(rules: Iterable[ClassificationRule]) -> list[ClassificationRule]:
    """Active rules by priority descending, insertion order within a priority."""
    return sorted(
        (rule for rule in rules if rule.is_active),
        key=lambda rule: -rule.priority,
    )
