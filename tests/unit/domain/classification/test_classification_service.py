"""Tests for TransactionClassificationService."""

from decimal import Decimal
from typing import Optional

import pytest

from cardclass.domain.classification.defaults import JSON_FORMAT_INSTRUCTION
from cardclass.domain.classification.exceptions import (
    NoActiveAccountsError,
    ReconciliationError,
    ResponseParseError,
    TransportError,
    UnknownModelError,
)
from cardclass.domain.classification.ports import ModelProviderFactory
from cardclass.domain.classification.services import (
    ChatModelProvider,
    TransactionClassificationService,
)
from cardclass.domain.classification.value_objects import (
    Account,
    CardTransaction,
    ClassificationContext,
    ClassificationMethod,
    ClassificationRule,
    ConfirmedExample,
    RuleConditions,
)
from cardclass.domain.shared.exceptions import ErrorCode


# Mock chat provider for testing
class MockChatProvider(ChatModelProvider):
    """Mock provider returning a canned reply."""

    def __init__(
        self,
        response: str = "",
        model: str = "mock-model",
        error: Optional[Exception] = None,
    ):
        self._response = response
        self._model = model
        self._error = error
        self.calls: list[tuple[str, str, float]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
    ) -> str:
        self.calls.append((system_prompt, user_prompt, temperature))
        if self._error is not None:
            raise self._error
        return self._response

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "mock"


class MockProviderFactory(ModelProviderFactory):
    """Factory handing out a single provider and recording requested ids."""

    def __init__(self, provider: ChatModelProvider):
        self._provider = provider
        self.requested: list[Optional[str]] = []

    def get_provider(self, model_id: Optional[str] = None) -> ChatModelProvider:
        self.requested.append(model_id)
        return self._provider


def ai_reply(code: str = "51100", name: str = "복리후생비", confidence: float = 0.9):
    return (
        f'{{"account_code": "{code}", "account_name": "{name}", '
        f'"confidence": {confidence}, "reason": "카페 이용은 복리후생비"}}'
    )


WELFARE = Account(code="51100", name="복리후생비")
TRAVEL = Account(code="51200", name="여비교통비")


@pytest.fixture
def transaction() -> CardTransaction:
    return CardTransaction(
        amount=Decimal("4500"),
        merchant_name="스타벅스 강남점",
        mcc_code="5814",
        transaction_date="2025-01-15",
    )


@pytest.fixture
def cafe_rule() -> ClassificationRule:
    return ClassificationRule(
        name="카페/커피숍 → 복리후생비",
        conditions=RuleConditions(mcc_codes=("5814",)),
        account=WELFARE,
        priority=10,
    )


class TestRulePath:
    """Rule matches never call the model."""

    @pytest.mark.asyncio
    async def test_rule_match_returns_rule_result(self, transaction, cafe_rule):
        provider = MockChatProvider()
        factory = MockProviderFactory(provider)
        service = TransactionClassificationService(factory)
        context = ClassificationContext(rules=[cafe_rule], accounts=[WELFARE])

        result = await service.classify(transaction, context)

        assert result.method == ClassificationMethod.RULE
        assert result.account_code == "51100"
        assert result.confidence == 1.0
        assert result.rule_name == "카페/커피숍 → 복리후생비"
        assert result.reason == '룰 "카페/커피숍 → 복리후생비"에 의해 자동 분류되었습니다.'
        assert provider.calls == []
        assert factory.requested == []

    @pytest.mark.asyncio
    async def test_rule_match_needs_no_accounts(self, transaction, cafe_rule):
        service = TransactionClassificationService(
            MockProviderFactory(MockChatProvider()),
        )

        result = await service.classify(
            transaction,
            ClassificationContext(rules=[cafe_rule]),
        )

        assert result.is_from_rule


class TestAIPath:
    """AI fallback when no rule matches."""

    @pytest.mark.asyncio
    async def test_ai_result(self, transaction):
        provider = MockChatProvider(response=ai_reply(), model="claude-test")
        service = TransactionClassificationService(MockProviderFactory(provider))
        context = ClassificationContext(accounts=[WELFARE, TRAVEL])

        result = await service.classify(transaction, context)

        assert result.method == ClassificationMethod.AI
        assert result.account_code == "51100"
        assert result.account_name == "복리후생비"
        assert result.confidence == pytest.approx(0.9)
        assert result.reason == "카페 이용은 복리후생비"
        assert result.model_id == "claude-test"

    @pytest.mark.asyncio
    async def test_prompts_and_settings_passed_to_provider(self, transaction):
        provider = MockChatProvider(response=ai_reply())
        factory = MockProviderFactory(provider)
        service = TransactionClassificationService(factory)
        example = ConfirmedExample(
            merchant_name="이디야",
            mcc_code="5814",
            amount=Decimal("3000"),
            account_code="51100",
            account_name="복리후생비",
        )
        context = ClassificationContext(
            accounts=[WELFARE],
            recent_examples=[example],
            model_id="exaone-35-7-8b",
            temperature=0.2,
        )

        await service.classify(transaction, context)

        system_prompt, user_prompt, temperature = provider.calls[0]
        assert factory.requested == ["exaone-35-7-8b"]
        assert temperature == pytest.approx(0.2)
        assert system_prompt.endswith(JSON_FORMAT_INSTRUCTION)
        assert "- 이디야 (MCC:5814, 3000원) → 51100 복리후생비" in system_prompt
        assert "스타벅스 강남점" in user_prompt
        assert "4,500원" in user_prompt

    @pytest.mark.asyncio
    async def test_rule_miss_falls_through_to_ai(self, transaction):
        fuel_rule = ClassificationRule(
            name="주유소",
            conditions=RuleConditions(mcc_codes=("5541",)),
            account=TRAVEL,
        )
        provider = MockChatProvider(response=ai_reply())
        service = TransactionClassificationService(MockProviderFactory(provider))

        result = await service.classify(
            transaction,
            ClassificationContext(rules=[fuel_rule], accounts=[WELFARE, TRAVEL]),
        )

        assert result.is_from_ai
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_name_fallback_reconciles(self, transaction):
        provider = MockChatProvider(response=ai_reply(code="99999", name="복리후생"))
        service = TransactionClassificationService(MockProviderFactory(provider))

        result = await service.classify(
            transaction,
            ClassificationContext(accounts=[WELFARE, TRAVEL]),
        )

        assert result.account_code == "51100"
        assert result.account_name == "복리후생비"


class TestAIPathFailures:
    """Every AI-path failure raises; none becomes a placeholder result."""

    @pytest.mark.asyncio
    async def test_no_active_accounts_fails_before_model_call(self, transaction):
        provider = MockChatProvider(response=ai_reply())
        factory = MockProviderFactory(provider)
        service = TransactionClassificationService(factory)
        context = ClassificationContext(
            accounts=[Account(code="51100", name="복리후생비", is_active=False)],
        )

        with pytest.raises(NoActiveAccountsError) as exc_info:
            await service.classify(transaction, context)

        assert exc_info.value.code == ErrorCode.NO_ACCOUNTS
        assert provider.calls == []
        assert factory.requested == []

    @pytest.mark.asyncio
    async def test_unresolvable_account(self, transaction):
        provider = MockChatProvider(response=ai_reply(code="ZZZ", name="없는계정"))
        service = TransactionClassificationService(MockProviderFactory(provider))

        with pytest.raises(ReconciliationError):
            await service.classify(transaction, ClassificationContext(accounts=[WELFARE]))

    @pytest.mark.asyncio
    async def test_unparseable_response(self, transaction):
        provider = MockChatProvider(response="분류할 수 없습니다")
        service = TransactionClassificationService(MockProviderFactory(provider))

        with pytest.raises(ResponseParseError) as exc_info:
            await service.classify(transaction, ClassificationContext(accounts=[WELFARE]))

        assert exc_info.value.raw_text == "분류할 수 없습니다"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, transaction):
        error = TransportError(provider="mock", reason="Service Unavailable", status_code=503)
        provider = MockChatProvider(error=error)
        service = TransactionClassificationService(MockProviderFactory(provider))

        with pytest.raises(TransportError) as exc_info:
            await service.classify(transaction, ClassificationContext(accounts=[WELFARE]))

        assert exc_info.value is error
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_configuration_error_from_factory_propagates(self, transaction):
        class FailingFactory(ModelProviderFactory):
            def get_provider(self, model_id=None):
                raise UnknownModelError(model_id or "")

        service = TransactionClassificationService(FailingFactory())

        with pytest.raises(UnknownModelError):
            await service.classify(
                transaction,
                ClassificationContext(accounts=[WELFARE], model_id="gpt-unknown"),
            )
