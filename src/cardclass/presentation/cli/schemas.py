"""Input file schemas for the CLI.

Context and transaction files are JSON. They are validated with pydantic
and converted into domain value objects before any classification runs.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cardclass.domain.classification.services import sort_rules
from cardclass.domain.classification.value_objects import (
    Account,
    CardTransaction,
    CardType,
    ClassificationContext,
    ClassificationRule,
    ConfirmedExample,
    PromptTemplates,
    RuleConditions,
)
from cardclass.domain.shared.exceptions import ErrorCode, ValidationError


class AccountInput(BaseModel):
    """A chart-of-accounts entry."""

    code: str = Field(..., min_length=1, description="Account code, e.g. 51100")
    name: str = Field(..., min_length=1, description="Account name, e.g. 복리후생비")
    category: Optional[str] = None
    is_active: bool = True
    id: Optional[str] = None

    def to_domain(self) -> Account:
        return Account(
            code=self.code,
            name=self.name,
            category=self.category,
            is_active=self.is_active,
            id=self.id,
        )


class RuleConditionsInput(BaseModel):
    """Rule conditions; a field left out places no constraint."""

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    mcc_codes: Optional[list[str]] = Field(None, description="MCC codes, e.g. 5814")
    merchant_name_contains: Optional[str] = None
    amount_min: Optional[Decimal] = Field(None, ge=0)
    amount_max: Optional[Decimal] = Field(None, ge=0)

    @model_validator(mode="after")
    def _check_amount_range(self) -> RuleConditionsInput:
        if (
            self.amount_min is not None
            and self.amount_max is not None
            and self.amount_min > self.amount_max
        ):
            msg = "amount_min must not exceed amount_max"
            raise ValueError(msg)
        return self

    def to_domain(self) -> RuleConditions:
        return RuleConditions(
            mcc_codes=tuple(self.mcc_codes) if self.mcc_codes is not None else None,
            merchant_name_contains=self.merchant_name_contains or None,
            amount_min=self.amount_min,
            amount_max=self.amount_max,
        )


class RuleInput(BaseModel):
    """A classification rule; its target account is referenced by code."""

    name: str = Field(..., min_length=1)
    account_code: str = Field(..., min_length=1)
    priority: int = 0
    conditions: RuleConditionsInput = Field(default_factory=RuleConditionsInput)
    is_active: bool = True
    description: Optional[str] = None
    id: Optional[str] = None


class ExampleInput(BaseModel):
    """A confirmed past classification."""

    merchant_name: str
    mcc_code: str = ""
    amount: Decimal
    account_code: str
    account_name: str
    description: Optional[str] = None
    was_corrected: bool = False

    def to_domain(self) -> ConfirmedExample:
        return ConfirmedExample(
            merchant_name=self.merchant_name,
            mcc_code=self.mcc_code,
            amount=self.amount,
            account_code=self.account_code,
            account_name=self.account_name,
            description=self.description,
            was_corrected=self.was_corrected,
        )


class PromptsInput(BaseModel):
    """Custom prompt templates; unset fields fall back to the defaults."""

    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None

    def to_domain(self) -> PromptTemplates:
        defaults = PromptTemplates.default()
        return PromptTemplates(
            system_prompt=self.system_prompt or defaults.system_prompt,
            user_prompt=self.user_prompt or defaults.user_prompt,
        )


class TransactionInput(BaseModel):
    """A card transaction as it appears in input files."""

    amount: Decimal = Field(..., gt=0)
    merchant_name: Optional[str] = None
    mcc_code: Optional[str] = None
    transaction_date: Optional[str] = None
    description: Optional[str] = None
    card_type: Optional[str] = None

    def to_domain(self) -> CardTransaction:
        return CardTransaction(
            amount=self.amount,
            merchant_name=self.merchant_name or None,
            mcc_code=self.mcc_code or None,
            transaction_date=self.transaction_date or None,
            description=self.description or None,
            card_type=CardType.parse(self.card_type),
        )


class TransactionsFile(BaseModel):
    transactions: list[TransactionInput] = Field(default_factory=list)

    def to_domain(self) -> list[CardTransaction]:
        return [tx.to_domain() for tx in self.transactions]


class ContextFile(BaseModel):
    """A company's classification setup: accounts, rules, examples, prompts."""

    accounts: list[AccountInput] = Field(default_factory=list)
    rules: list[RuleInput] = Field(default_factory=list)
    recent_examples: list[ExampleInput] = Field(default_factory=list)
    prompts: PromptsInput = Field(default_factory=PromptsInput)
    model_id: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=1.0)

    def to_accounts(self) -> list[Account]:
        return [account.to_domain() for account in self.accounts]

    def to_rules(self, accounts: list[Account]) -> list[ClassificationRule]:
        """Resolve each rule's account code against the given accounts.

        Raises
        ------
        ValidationError
            If a rule references an account code that is not defined
        """
        by_code = {account.code: account for account in accounts}
        rules = []
        for rule in self.rules:
            account = by_code.get(rule.account_code)
            if account is None:
                msg = f"Rule '{rule.name}' references unknown account {rule.account_code}"
                raise ValidationError(
                    msg,
                    code=ErrorCode.INVALID_RULE,
                    details={"rule": rule.name, "account_code": rule.account_code},
                )
            rules.append(
                ClassificationRule(
                    name=rule.name,
                    conditions=rule.conditions.to_domain(),
                    account=account,
                    priority=rule.priority,
                    is_active=rule.is_active,
                    description=rule.description,
                    id=rule.id,
                ),
            )
        return rules

    def to_domain(
        self,
        default_temperature: float = 0.0,
        examples_limit: Optional[int] = None,
    ) -> ClassificationContext:
        accounts = self.to_accounts()
        examples = [example.to_domain() for example in self.recent_examples]
        if examples_limit is not None:
            examples = examples[:examples_limit]

        return ClassificationContext(
            rules=tuple(sort_rules(self.to_rules(accounts))),
            accounts=tuple(account for account in accounts if account.is_active),
            recent_examples=tuple(examples),
            templates=self.prompts.to_domain(),
            model_id=self.model_id,
            temperature=(
                self.temperature
                if self.temperature is not None
                else default_temperature
            ),
        )
