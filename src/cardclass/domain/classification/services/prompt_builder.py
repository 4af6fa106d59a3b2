"""Prompt construction from editable templates.

Placeholders use ``{{key}}`` syntax and are replaced literally: every
occurrence, no recursive expansion and no escaping beyond the JSON encoding
of the accounts list.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal

from cardclass.domain.classification.defaults import (
    CURRENCY_SUFFIX,
    EXAMPLES_HEADER,
    JSON_FORMAT_INSTRUCTION,
    NO_VALUE,
    UNKNOWN_VALUE,
)
from cardclass.domain.classification.value_objects import (
    Account,
    BuiltPrompts,
    CardTransaction,
    ConfirmedExample,
)

_FRACTION_QUANTUM = Decimal("0.001")
_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def build_prompts(
    transaction: CardTransaction,
    accounts: Iterable[Account],
    recent_examples: Iterable[ConfirmedExample],
    system_template: str,
    user_template: str,
) -> BuiltPrompts:
    system_vars = {
        "accounts_list": format_accounts_list(accounts),
        "examples": format_examples(recent_examples),
    }
    user_vars = {
        "merchant_name": transaction.merchant_name or UNKNOWN_VALUE,
        "mcc_code": transaction.mcc_code or UNKNOWN_VALUE,
        "amount": format_amount(transaction.amount) + CURRENCY_SUFFIX,
        "transaction_date": transaction.transaction_date or UNKNOWN_VALUE,
        "description": transaction.description or NO_VALUE,
    }

    system_prompt = resolve_template(system_template, system_vars)
    system_prompt += JSON_FORMAT_INSTRUCTION
    user_prompt = resolve_template(user_template, user_vars)

    return BuiltPrompts(system_prompt=system_prompt, user_prompt=user_prompt)


def resolve_template(template: str, variables: Mapping[str, str]) -> str:
    # Single pass: substituted values are never scanned again
    return _PLACEHOLDER.sub(
        lambda match: variables.get(match.group(1), match.group(0)),
        template,
    )


def format_accounts_list(accounts: Iterable[Account]) -> str:
    accounts_list = [
        account.to_prompt_dict() for account in accounts if account.is_active
    ]
    return json.dumps(accounts_list, indent=2, ensure_ascii=False)


def format_examples(examples: Iterable[ConfirmedExample]) -> str:
    lines = [
        f"- {ex.merchant_name} (MCC:{ex.mcc_code}, {format_plain(ex.amount)}원) "
        f"→ {ex.account_code} {ex.account_name}"
        for ex in examples
    ]
    if not lines:
        return ""
    return EXAMPLES_HEADER + "\n".join(lines)


def format_amount(amount: Decimal) -> str:
    """Amount with comma thousands separators, e.g. ``1,234,567``.

    Up to three fraction digits are kept; trailing zeros are dropped.
    """
    value = _normalize(amount.quantize(_FRACTION_QUANTUM))
    return f"{value:,f}"


def format_plain(amount: Decimal) -> str:
    """Amount without separators or trailing zeros, e.g. ``50000``."""
    return f"{_normalize(amount):f}"


def _normalize(amount: Decimal) -> Decimal:
    if amount == amount.to_integral_value():
        return amount.quantize(Decimal(1))
    return amount.normalize()
