"""Mapping of model-returned account references onto real accounts.

Models occasionally paraphrase account names or use stale codes. An exact
code match is accepted as-is; otherwise the first active account whose name
contains the returned name is used and its code and name replace the
model's. When several accounts match by name the first in list order wins.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cardclass.domain.classification.exceptions import ReconciliationError
from cardclass.domain.classification.value_objects import (
    Account,
    AIClassificationResponse,
)

logger = logging.getLogger(__name__)


def reconcile_account(
    parsed: AIClassificationResponse,
    accounts: Iterable[Account],
) -> AIClassificationResponse:
    active_accounts = [account for account in accounts if account.is_active]

    for account in active_accounts:
        if account.code == parsed.account_code:
            return parsed

    name_matches = _find_by_name(parsed.account_name, active_accounts)
    if not name_matches:
        logger.warning(
            "AI returned unknown account %s %s",
            parsed.account_code,
            parsed.account_name,
        )
        raise ReconciliationError(parsed.account_code, parsed.account_name)

    if len(name_matches) > 1:
        logger.warning(
            "AI account name '%s' matches %d accounts, using first: %s",
            parsed.account_name,
            len(name_matches),
            [account.display_label for account in name_matches],
        )

    fallback = name_matches[0]
    logger.info(
        "Reconciled AI account %s %s -> %s",
        parsed.account_code,
        parsed.account_name,
        fallback.display_label,
    )
    return parsed.model_copy(
        update={"account_code": fallback.code, "account_name": fallback.name},
    )


def _find_by_name(name: str, accounts: list[Account]) -> list[Account]:
    # An empty name would be a substring of every account
    if not name:
        return []
    return [account for account in accounts if name in account.name]
