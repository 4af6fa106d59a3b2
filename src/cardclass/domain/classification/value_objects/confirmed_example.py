"""Confirmed classification example value object."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ConfirmedExample:
    """
    Denormalized snapshot of a past classification an operator confirmed.

    Supplied to the model as few-shot context, most recent first.
    """

    merchant_name: str
    mcc_code: str
    amount: Decimal
    account_code: str
    account_name: str
    description: Optional[str] = None
    was_corrected: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", Decimal(str(self.amount)))

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        return (self.merchant_name, self.mcc_code, self.account_code)
