"""Built-in prompt templates, placeholders and fixed prompt fragments.

The JSON format instruction is never part of an editable template; the
prompt builder always appends it so response parsing can rely on it.
"""

from dataclasses import dataclass
from typing import Literal

DEFAULT_SYSTEM_PROMPT = """당신은 기업 회계 전문가입니다. 주어진 거래 내역을 분석하여 해당 회사의 계정과목 체계에 맞는 계정과목을 추천하세요.

반드시 아래 회사 계정과목 목록에서만 선택해야 합니다.

회사 계정과목 목록:
{{accounts_list}}{{examples}}"""  # NOQA: E501

DEFAULT_USER_PROMPT = """다음 거래를 분류해주세요:
- 가맹점: {{merchant_name}}
- 업종코드(MCC): {{mcc_code}}
- 금액: {{amount}}
- 거래일: {{transaction_date}}
- 적요: {{description}}"""

JSON_FORMAT_INSTRUCTION = """

반드시 아래 JSON 형식으로만 응답하세요. 다른 텍스트는 포함하지 마세요:
{"account_code": "코드", "account_name": "계정과목명", "confidence": 0.0~1.0, "reason": "분류 사유"}"""  # NOQA: E501

EXAMPLES_HEADER = "\n\n과거 분류 사례:\n"

UNKNOWN_VALUE = "미상"
NO_VALUE = "없음"
CURRENCY_SUFFIX = "원"


def rule_reason(rule_name: str) -> str:
    return f'룰 "{rule_name}"에 의해 자동 분류되었습니다.'


@dataclass(frozen=True)
class Placeholder:
    """A template placeholder, as listed in the prompt settings reference."""

    key: str
    description: str
    target: Literal["system", "user"]

    @property
    def token(self) -> str:
        return "{{" + self.key + "}}"


PLACEHOLDERS: tuple[Placeholder, ...] = (
    Placeholder("accounts_list", "계정과목 목록 JSON", "system"),
    Placeholder("examples", "과거 확정된 분류 사례", "system"),
    Placeholder("merchant_name", "가맹점명", "user"),
    Placeholder("mcc_code", "업종코드 (MCC)", "user"),
    Placeholder("amount", "금액 (원)", "user"),
    Placeholder("transaction_date", "거래일", "user"),
    Placeholder("description", "적요", "user"),
)
