"""Card transaction value object."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from cardclass.domain.shared.exceptions import ErrorCode, ValidationError


class CardType(Enum):
    """Kind of card a transaction was made with."""

    CORPORATE = "corporate"
    PERSONAL = "personal"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CardType"]:
        """Return the card type for a raw value, None when unrecognised."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class CardTransaction:
    """A single card transaction to classify.

    Immutable input; persistence belongs to the caller.
    """

    amount: Decimal
    merchant_name: Optional[str] = None
    mcc_code: Optional[str] = None
    transaction_date: Optional[str] = None
    description: Optional[str] = None
    card_type: Optional[CardType] = None

    def __post_init__(self) -> None:
        if self.mcc_code is not None:
            object.__setattr__(self, "mcc_code", self.mcc_code.strip() or None)
        object.__setattr__(self, "amount", _to_decimal(self.amount))
        if not self.amount.is_finite():
            msg = f"Transaction amount must be a finite number, got {self.amount}"
            raise ValidationError(
                msg,
                code=ErrorCode.INVALID_AMOUNT,
                details={"amount": str(self.amount)},
            )
        if self.amount <= 0:
            msg = f"Transaction amount must be positive, got {self.amount}"
            raise ValidationError(
                msg,
                code=ErrorCode.INVALID_AMOUNT,
                details={"amount": str(self.amount)},
            )

    def __str__(self) -> str:
        merchant = self.merchant_name or "?"
        return f"CardTransaction({merchant}, MCC={self.mcc_code}, {self.amount})"


def _to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so 0.1 stays 0.1 instead of its binary expansion
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        msg = f"Invalid transaction amount: {value!r}"
        raise ValidationError(
            msg,
            code=ErrorCode.INVALID_AMOUNT,
            details={"amount": repr(value)},
        ) from e
