"""Per-invocation classification context."""

from dataclasses import dataclass, field
from typing import Optional

from cardclass.domain.classification.value_objects.account import Account
from cardclass.domain.classification.value_objects.classification_rule import (
    ClassificationRule,
)
from cardclass.domain.classification.value_objects.confirmed_example import (
    ConfirmedExample,
)
from cardclass.domain.classification.value_objects.prompt_templates import (
    PromptTemplates,
)


@dataclass(frozen=True)
class ClassificationContext:
    """
    Snapshot of everything one classification needs.

    Passed explicitly into every call so concurrent classifications share no
    mutable state. Rules are expected active-only and sorted by priority
    descending; accounts are expected active-only.
    """

    rules: tuple[ClassificationRule, ...] = ()
    accounts: tuple[Account, ...] = ()
    recent_examples: tuple[ConfirmedExample, ...] = ()
    templates: PromptTemplates = field(default_factory=PromptTemplates.default)
    model_id: Optional[str] = None  # None = settings default
    temperature: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "recent_examples", tuple(self.recent_examples))
        if not 0.0 <= self.temperature <= 1.0:
            msg = f"Temperature must be between 0.0 and 1.0, got {self.temperature}"
            raise ValueError(msg)

    @property
    def active_accounts(self) -> list[Account]:
        return [account for account in self.accounts if account.is_active]
