"""Transaction classification service.

Resolution Strategy:
1. Rule-based matching (first matching rule by priority wins)
2. AI classification (only when no rule matches)
   build prompts -> call model -> parse response -> reconcile account

Every AI-path failure raises; nothing falls back to a placeholder account.
The service is stateless between calls: everything an invocation needs
arrives in its ClassificationContext.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cardclass.domain.classification.defaults import rule_reason
from cardclass.domain.classification.exceptions import NoActiveAccountsError
from cardclass.domain.classification.services.account_reconciliation import (
    reconcile_account,
)
from cardclass.domain.classification.services.prompt_builder import build_prompts
from cardclass.domain.classification.services.response_parser import (
    parse_ai_response,
)
from cardclass.domain.classification.services.rule_engine import match_transaction
from cardclass.domain.classification.value_objects import (
    CardTransaction,
    ClassificationContext,
    ClassificationMethod,
    ClassifyResult,
)

if TYPE_CHECKING:
    from cardclass.domain.classification.ports import ModelProviderFactory

logger = logging.getLogger(__name__)


class TransactionClassificationService:
    """Classifies card transactions: rules first, AI as fallback."""

    def __init__(self, provider_factory: ModelProviderFactory):
        self._provider_factory = provider_factory

    async def classify(
        self,
        transaction: CardTransaction,
        context: ClassificationContext,
    ) -> ClassifyResult:
        result = self.classify_with_rules(transaction, context)
        if result is not None:
            return result

        return await self.classify_with_ai(transaction, context)

    def classify_with_rules(
        self,
        transaction: CardTransaction,
        context: ClassificationContext,
    ) -> ClassifyResult | None:
        match = match_transaction(context.rules, transaction)
        if not match.matched or match.rule is None or match.account is None:
            return None

        logger.info(
            "Rule '%s' classified %s as %s",
            match.rule.name,
            transaction,
            match.account.display_label,
        )
        return ClassifyResult(
            account_code=match.account.code,
            account_name=match.account.name,
            confidence=1.0,
            reason=rule_reason(match.rule.name),
            method=ClassificationMethod.RULE,
            rule_name=match.rule.name,
        )

    async def classify_with_ai(
        self,
        transaction: CardTransaction,
        context: ClassificationContext,
    ) -> ClassifyResult:
        accounts = context.active_accounts
        if not accounts:
            raise NoActiveAccountsError()

        provider = self._provider_factory.get_provider(context.model_id)

        prompts = build_prompts(
            transaction=transaction,
            accounts=accounts,
            recent_examples=context.recent_examples,
            system_template=context.templates.system_prompt,
            user_template=context.templates.user_prompt,
        )
        logger.debug("AI system prompt:\n%s", prompts.system_prompt)
        logger.debug("AI user prompt:\n%s", prompts.user_prompt)

        response_text = await provider.complete(
            prompts.system_prompt,
            prompts.user_prompt,
            temperature=context.temperature,
        )
        logger.debug("AI response (%s): %s", provider.model_name, response_text)

        parsed = parse_ai_response(response_text)
        reconciled = reconcile_account(parsed, accounts)

        logger.info(
            "AI (%s) classified %s as %s %s (confidence: %.2f)",
            provider.model_name,
            transaction,
            reconciled.account_code,
            reconciled.account_name,
            reconciled.confidence,
        )
        return ClassifyResult(
            account_code=reconciled.account_code,
            account_name=reconciled.account_name,
            confidence=reconciled.confidence,
            reason=reconciled.reason,
            method=ClassificationMethod.AI,
            model_id=provider.model_name,
        )
