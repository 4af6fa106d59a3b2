"""Classification rule value object."""

from typing import Optional

from cardclass.domain.classification.value_objects.account import Account
from cardclass.domain.classification.value_objects.card_transaction import (
    CardTransaction,
)
from cardclass.domain.classification.value_objects.rule_conditions import (
    RuleConditions,
)


class ClassificationRule:
    """Rule mapping transactions that satisfy its conditions to an account.

    Rules are persisted and managed elsewhere; the classifier only consumes
    them, already filtered to active rules and sorted by priority.
    """

    def __init__(  # NOQA: PLR0913
        self,
        name: str,
        conditions: RuleConditions,
        account: Account,
        priority: int = 0,
        is_active: bool = True,
        description: Optional[str] = None,
        id: Optional[str] = None,  # NOQA: A002
    ):
        self._id = id
        self._name = name.strip() if name else ""
        self._conditions = conditions
        self._account = account
        self._priority = priority
        self._is_active = is_active
        self._description = description

        self._validate()

    @property
    def id(self) -> Optional[str]:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def conditions(self) -> RuleConditions:
        return self._conditions

    @property
    def account(self) -> Account:
        return self._account

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def description(self) -> Optional[str]:
        return self._description

    def _validate(self) -> None:
        if not self._name:
            msg = "Rule name cannot be empty"
            raise ValueError(msg)

    def matches(self, transaction: CardTransaction) -> bool:
        if not self._is_active:
            return False
        return self._conditions.matches(transaction)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClassificationRule):
            return False
        if self._id is not None or other._id is not None:
            return self._id == other._id
        return (
            self._name == other._name
            and self._priority == other._priority
            and self._conditions == other._conditions
            and self._account == other._account
        )

    def __hash__(self) -> int:
        if self._id is not None:
            return hash(self._id)
        return hash((self._name, self._priority, self._conditions, self._account))

    def __str__(self) -> str:
        status = "ACTIVE" if self._is_active else "INACTIVE"
        return (
            f"ClassificationRule[{status}]: '{self._name}' "
            f"{self._conditions} -> {self._account.display_label} "
            f"(priority={self._priority})"
        )
