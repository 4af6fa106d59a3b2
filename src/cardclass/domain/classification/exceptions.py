"""Classification domain exceptions.

Every failure on the AI path is terminal for the single transaction being
classified. None of these is ever downgraded to a placeholder account; the
caller (CLI or batch wrapper) reports them with their details attached.
"""

from typing import Any

from cardclass.domain.shared.exceptions import DomainException, ErrorCode

_RAW_TEXT_PREVIEW = 500


class ClassificationError(DomainException):
    """Base exception for classification errors."""


class ConfigurationError(ClassificationError):
    """Raised when the classification cannot start due to missing setup."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class NoActiveAccountsError(ConfigurationError):
    """Raised when AI fallback is needed but no active accounts exist."""

    def __init__(self) -> None:
        super().__init__(
            message="등록된 계정과목이 없습니다. 먼저 계정과목을 등록하세요.",
            code=ErrorCode.NO_ACCOUNTS,
        )


class UnknownModelError(ConfigurationError):
    """Raised when a model id is not registered."""

    def __init__(self, model_id: str) -> None:
        super().__init__(
            message=f"알 수 없는 모델: {model_id}",
            code=ErrorCode.UNKNOWN_MODEL,
            details={"model_id": model_id},
        )


class MissingCredentialsError(ConfigurationError):
    """Raised when a model is selected whose credentials are not configured."""

    def __init__(self, model_id: str, missing: list[str]) -> None:
        super().__init__(
            message=(
                f"모델 '{model_id}' 설정이 없습니다: "
                f"{', '.join(missing)} 환경 변수를 설정하세요."
            ),
            code=ErrorCode.MISSING_CREDENTIALS,
            details={"model_id": model_id, "missing": missing},
        )


class TransportError(ClassificationError):
    """Raised when the model-calling capability fails.

    Not retried inside the core. The provider name and, where available,
    the HTTP status and a body excerpt are kept for diagnostics.
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        if status_code is not None:
            message = f"API 호출 실패 ({status_code}): {reason}"
        else:
            message = f"API 호출 실패: {reason}"
        details: dict[str, Any] = {"provider": provider, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        if body:
            details["body"] = body[:_RAW_TEXT_PREVIEW]
        super().__init__(
            message=message,
            code=ErrorCode.AI_TRANSPORT_FAILED,
            details=details,
        )
        self.provider = provider
        self.status_code = status_code


class ResponseParseError(ClassificationError):
    """Raised when the model output holds no valid classification object."""

    def __init__(self, raw_text: str, reason: str = "No JSON found") -> None:
        super().__init__(
            message=f"AI 응답 파싱 실패: {reason}",
            code=ErrorCode.AI_RESPONSE_UNPARSEABLE,
            details={"reason": reason, "raw_text": raw_text[:_RAW_TEXT_PREVIEW]},
        )
        self.raw_text = raw_text
        self.reason = reason


class ReconciliationError(ClassificationError):
    """Raised when the returned account matches no active account."""

    def __init__(self, account_code: str, account_name: str) -> None:
        super().__init__(
            message="AI가 유효하지 않은 계정과목을 반환했습니다",
            code=ErrorCode.AI_ACCOUNT_UNRESOLVED,
            details={"account_code": account_code, "account_name": account_name},
        )
        self.account_code = account_code
        self.account_name = account_name
