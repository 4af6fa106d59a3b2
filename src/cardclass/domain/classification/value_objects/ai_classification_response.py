"""Schema of the classification object a model must return."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AIClassificationResponse(BaseModel):
    """The four required keys of a model classification response.

    Confidence outside [0, 1] fails validation rather than being clamped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    account_code: str = Field(..., min_length=1)
    account_name: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str

    @field_validator("account_code", "account_name", mode="before")
    @classmethod
    def _coerce_numeric_text(cls, v: Any) -> Any:
        # Models sometimes emit account codes as bare numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
