"""Rule condition set value object."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from cardclass.domain.classification.value_objects.card_transaction import (
    CardTransaction,
)


@dataclass(frozen=True)
class RuleConditions:
    """
    Conditions a transaction must satisfy for a rule to apply.

    Every specified condition must hold (AND). A condition that is not set
    places no constraint on the transaction; it does not require the
    corresponding transaction field to be empty.
    """

    mcc_codes: Optional[tuple[str, ...]] = None
    merchant_name_contains: Optional[str] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.mcc_codes is not None:
            object.__setattr__(
                self,
                "mcc_codes",
                tuple(str(code).strip() for code in self.mcc_codes),
            )
        if self.amount_min is not None:
            object.__setattr__(self, "amount_min", Decimal(str(self.amount_min)))
        if self.amount_max is not None:
            object.__setattr__(self, "amount_max", Decimal(str(self.amount_max)))

    @property
    def is_empty(self) -> bool:
        return (
            not self.mcc_codes
            and not self.merchant_name_contains
            and self.amount_min is None
            and self.amount_max is None
        )

    def matches(self, transaction: CardTransaction) -> bool:  # NOQA: PLR0911
        if self.mcc_codes:
            if not transaction.mcc_code:
                return False
            if transaction.mcc_code not in self.mcc_codes:
                return False

        # Case-insensitive substring
        if self.merchant_name_contains:
            if not transaction.merchant_name:
                return False
            needle = self.merchant_name_contains.lower()
            if needle not in transaction.merchant_name.lower():
                return False

        if self.amount_min is not None and transaction.amount < self.amount_min:
            return False

        if self.amount_max is not None and transaction.amount > self.amount_max:
            return False

        return True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleConditions":
        mcc_codes = data.get("mcc_codes")
        amount_min = data.get("amount_min")
        amount_max = data.get("amount_max")
        return cls(
            mcc_codes=tuple(mcc_codes) if mcc_codes is not None else None,
            merchant_name_contains=data.get("merchant_name_contains") or None,
            amount_min=Decimal(str(amount_min)) if amount_min is not None else None,
            amount_max=Decimal(str(amount_max)) if amount_max is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.mcc_codes is not None:
            data["mcc_codes"] = list(self.mcc_codes)
        if self.merchant_name_contains:
            data["merchant_name_contains"] = self.merchant_name_contains
        if self.amount_min is not None:
            data["amount_min"] = _to_number(self.amount_min)
        if self.amount_max is not None:
            data["amount_max"] = _to_number(self.amount_max)
        return data

    def __str__(self) -> str:
        parts = []
        if self.mcc_codes:
            parts.append(f"MCC in {list(self.mcc_codes)}")
        if self.merchant_name_contains:
            parts.append(f"merchant contains '{self.merchant_name_contains}'")
        if self.amount_min is not None:
            parts.append(f"amount >= {self.amount_min}")
        if self.amount_max is not None:
            parts.append(f"amount <= {self.amount_max}")
        return " AND ".join(parts) if parts else "(any)"


def _to_number(value: Decimal) -> int | float:
    # JSON has no decimal type
    if value == value.to_integral_value():
        return int(value)
    return float(value)
