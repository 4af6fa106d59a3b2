"""Prompt improvement service.

Asks the model to rewrite a company's system prompt based on classifications
an operator has confirmed. The suggestion is returned for review only; it is
never applied automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from cardclass.domain.classification.defaults import NO_VALUE
from cardclass.domain.classification.exceptions import (
    ConfigurationError,
    ResponseParseError,
)
from cardclass.domain.classification.services import extract_json
from cardclass.domain.classification.services.prompt_builder import format_plain
from cardclass.domain.shared.exceptions import ErrorCode

if TYPE_CHECKING:
    from cardclass.domain.classification.ports import ModelProviderFactory
    from cardclass.domain.classification.value_objects import (
        Account,
        ConfirmedExample,
    )

logger = logging.getLogger(__name__)

META_SYSTEM_PROMPT = (
    "당신은 AI 프롬프트 엔지니어링 전문가입니다. "
    "한국 기업의 법인카드 거래 분류용 시스템 프롬프트를 개선해야 합니다."
)

META_USER_TEMPLATE = """## 현재 시스템 프롬프트
```
{current_prompt}
```

## 회사 계정과목 목록
{accounts_list}

## 확정된 거래 내역 ({count}건, 중복 제거 후)
{example_lines}

## 지시사항
위 확정된 거래 내역의 패턴을 분석하여 시스템 프롬프트를 개선하세요.

개선 방향:
1. 실제 거래 패턴에서 발견된 분류 규칙을 반영하세요 (예: 특정 가맹점 유형 → 특정 계정과목)
2. 수정 확정된 건이 있다면, 기존 분류가 틀렸던 패턴을 파악하여 가이드에 반영하세요
3. 기존 프롬프트의 구조(## 헤더, 플레이스홀더 등)는 유지하세요
4. {{{{accounts_list}}}}와 {{{{examples}}}} 플레이스홀더는 반드시 유지하세요. 런타임에 실제 값으로 치환됩니다
5. 불필요한 일반론은 줄이고, 이 회사에 특화된 구체적인 가이드를 추가하세요

반드시 아래 JSON 형식으로만 응답하세요:
{{"suggested_prompt": "개선된 시스템 프롬프트 전문", "reasoning": "주요 변경 사항 요약 (한국어, 3-5줄)"}}"""


@dataclass(frozen=True)
class PromptSuggestion:
    """A proposed system prompt and the model's summary of the changes."""

    suggested_prompt: str
    reasoning: str
    analyzed_count: int


def deduplicate_examples(
    examples: Iterable[ConfirmedExample],
) -> list[ConfirmedExample]:
    """Keep the first example per (merchant, MCC, final account) combination."""
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for example in examples:
        if example.dedup_key in seen:
            continue
        seen.add(example.dedup_key)
        unique.append(example)
    return unique


class PromptImprovementService:
    """Suggests an improved system prompt from confirmed classifications."""

    def __init__(self, provider_factory: ModelProviderFactory):
        self._provider_factory = provider_factory

    async def suggest(
        self,
        current_system_prompt: str,
        confirmed_examples: Sequence[ConfirmedExample],
        accounts: Sequence[Account],
        model_id: Optional[str] = None,
    ) -> PromptSuggestion:
        unique_examples = deduplicate_examples(confirmed_examples)
        if not unique_examples:
            raise ConfigurationError(
                message=(
                    "확정된 거래 내역이 없습니다. "
                    "먼저 거래를 분류하고 확정해주세요."
                ),
                code=ErrorCode.NO_CONFIRMED_EXAMPLES,
            )

        user_prompt = build_meta_prompt(current_system_prompt, unique_examples, accounts)
        provider = self._provider_factory.get_provider(model_id)

        logger.info(
            "Requesting prompt improvement from %s (%d examples)",
            provider.model_name,
            len(unique_examples),
        )
        response_text = await provider.complete(
            META_SYSTEM_PROMPT,
            user_prompt,
            temperature=0.0,
        )

        data = extract_json(response_text, allow_nested=True)
        if data is None:
            raise ResponseParseError(response_text)

        suggested_prompt = data.get("suggested_prompt")
        if not isinstance(suggested_prompt, str) or not suggested_prompt.strip():
            raise ResponseParseError(
                response_text,
                reason="suggested_prompt missing",
            )

        return PromptSuggestion(
            suggested_prompt=suggested_prompt,
            reasoning=str(data.get("reasoning") or ""),
            analyzed_count=len(unique_examples),
        )


def build_meta_prompt(
    current_system_prompt: str,
    examples: Sequence[ConfirmedExample],
    accounts: Iterable[Account],
) -> str:
    accounts_list = "\n".join(
        f"{account.code}: {account.name}" for account in accounts if account.is_active
    )
    return META_USER_TEMPLATE.format(
        current_prompt=current_system_prompt,
        accounts_list=accounts_list,
        count=len(examples),
        example_lines="\n".join(_format_example(example) for example in examples),
    )


def _format_example(example: ConfirmedExample) -> str:
    corrected = " (수정됨)" if example.was_corrected else ""
    return (
        f"- 가맹점: {example.merchant_name}, "
        f"MCC: {example.mcc_code or NO_VALUE}, "
        f"금액: {format_plain(example.amount)}원, "
        f"적요: {example.description or NO_VALUE} "
        f"→ {example.account_code} {example.account_name}{corrected}"
    )
