"""Tests for prompt construction."""

import json
from decimal import Decimal

import pytest

from cardclass.domain.classification.defaults import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_USER_PROMPT,
    EXAMPLES_HEADER,
    JSON_FORMAT_INSTRUCTION,
    PLACEHOLDERS,
)
from cardclass.domain.classification.services import (
    build_prompts,
    format_amount,
    resolve_template,
)
from cardclass.domain.classification.value_objects import (
    Account,
    CardTransaction,
    ConfirmedExample,
)


@pytest.fixture
def accounts() -> list[Account]:
    return [
        Account(code="51100", name="복리후생비", category="판관비"),
        Account(code="51400", name="접대비", category="판관비"),
        Account(code="59999", name="폐기계정", is_active=False),
    ]


@pytest.fixture
def transaction() -> CardTransaction:
    return CardTransaction(
        amount=Decimal("45000"),
        merchant_name="스타벅스 강남점",
        mcc_code="5814",
        transaction_date="2025-01-15",
        description="팀 회의",
    )


def build(transaction, accounts, examples=(), system="{{accounts_list}}", user=""):
    return build_prompts(
        transaction=transaction,
        accounts=accounts,
        recent_examples=examples,
        system_template=system,
        user_template=user,
    )


class TestUserPrompt:
    """User-side placeholder substitution."""

    def test_merchant_and_amount(self):
        tx = CardTransaction(amount=Decimal("1000"), merchant_name="Test")

        prompts = build(tx, [], user="{{merchant_name}}/{{amount}}")

        assert prompts.user_prompt == "Test/1,000원"

    def test_missing_fields_use_fallback_literals(self):
        tx = CardTransaction(amount=Decimal("1000"))

        prompts = build(
            tx,
            [],
            user="{{merchant_name}}|{{mcc_code}}|{{transaction_date}}|{{description}}",
        )

        assert prompts.user_prompt == "미상|미상|미상|없음"

    def test_replaces_every_occurrence(self, transaction):
        prompts = build(transaction, [], user="{{mcc_code}} {{mcc_code}}")

        assert prompts.user_prompt == "5814 5814"

    def test_default_user_template(self, transaction):
        prompts = build(transaction, [], user=DEFAULT_USER_PROMPT)

        assert "- 가맹점: 스타벅스 강남점" in prompts.user_prompt
        assert "- 금액: 45,000원" in prompts.user_prompt
        assert "{{" not in prompts.user_prompt


class TestSystemPrompt:
    """System-side substitution and the fixed format instruction."""

    def test_accounts_list_is_json_of_active_accounts(self, transaction, accounts):
        prompts = build(transaction, accounts)

        body = prompts.system_prompt.removesuffix(JSON_FORMAT_INSTRUCTION)
        assert json.loads(body) == [
            {"code": "51100", "name": "복리후생비", "category": "판관비"},
            {"code": "51400", "name": "접대비", "category": "판관비"},
        ]

    def test_accounts_list_keeps_korean_text(self, transaction, accounts):
        prompts = build(transaction, accounts)

        assert "복리후생비" in prompts.system_prompt

    @pytest.mark.parametrize(
        "template",
        ["", "plain text without placeholders", DEFAULT_SYSTEM_PROMPT],
    )
    def test_always_ends_with_format_instruction(self, transaction, accounts, template):
        prompts = build(transaction, accounts, system=template)

        assert prompts.system_prompt.endswith(JSON_FORMAT_INSTRUCTION)

    def test_no_examples_leaves_no_header(self, transaction, accounts):
        prompts = build(transaction, accounts, system="A{{examples}}B")

        assert prompts.system_prompt.startswith("AB")
        assert "과거 분류 사례" not in prompts.system_prompt

    def test_examples_block(self, transaction, accounts):
        examples = [
            ConfirmedExample(
                merchant_name="이마트 성수점",
                mcc_code="5411",
                amount=Decimal("32000"),
                account_code="52700",
                account_name="회의비",
            ),
        ]

        prompts = build(transaction, accounts, examples, system="{{examples}}")

        expected = EXAMPLES_HEADER + "- 이마트 성수점 (MCC:5411, 32000원) → 52700 회의비"
        assert prompts.system_prompt == expected + JSON_FORMAT_INSTRUCTION

    def test_no_recursive_expansion(self):
        tx = CardTransaction(amount=Decimal("1000"), merchant_name="{{mcc_code}}")

        prompts = build(tx, [], user="{{merchant_name}}")

        assert prompts.user_prompt == "{{mcc_code}}"


class TestFormatAmount:
    """Amount formatting."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (Decimal("1000"), "1,000"),
            (Decimal("1234567"), "1,234,567"),
            (Decimal("50000.00"), "50,000"),
            (Decimal("1234.5"), "1,234.5"),
            (Decimal("99.1234"), "99.123"),
        ],
    )
    def test_format(self, amount, expected):
        assert format_amount(amount) == expected


class TestResolveTemplate:
    def test_unknown_placeholders_left_alone(self):
        assert resolve_template("{{a}} {{b}}", {"a": "1"}) == "1 {{b}}"


class TestPlaceholders:
    def test_all_default_placeholders_listed(self):
        tokens = {placeholder.token for placeholder in PLACEHOLDERS}

        for placeholder in PLACEHOLDERS:
            template = (
                DEFAULT_SYSTEM_PROMPT
                if placeholder.target == "system"
                else DEFAULT_USER_PROMPT
            )
            assert placeholder.token in template
        assert len(tokens) == 7
