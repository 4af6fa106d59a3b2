"""Account (계정과목) value object."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Account:
    """
    A ledger account that transactions are classified into.

    The list of accounts supplied to a classification is the fixed universe
    of valid targets; it is read-only to the classifier.
    """

    code: str
    name: str
    category: Optional[str] = None
    is_active: bool = True
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            msg = "Account code cannot be empty"
            raise ValueError(msg)
        if not self.name or not self.name.strip():
            msg = "Account name cannot be empty"
            raise ValueError(msg)

    @property
    def display_label(self) -> str:
        return f"{self.code} {self.name}"

    def to_prompt_dict(self) -> dict:
        return {"code": self.code, "name": self.name, "category": self.category}
