"""Classification domain services."""

from cardclass.domain.classification.services.account_reconciliation import (
    reconcile_account,
)
from cardclass.domain.classification.services.chat_model_provider import (
    ChatModelProvider,
)
from cardclass.domain.classification.services.classification_service import (
    TransactionClassificationService,
)
from cardclass.domain.classification.services.prompt_builder import (
    build_prompts,
    format_amount,
    resolve_template,
)
from cardclass.domain.classification.services.response_parser import (
    extract_json,
    parse_ai_response,
)
from cardclass.domain.classification.services.rule_engine import (
    match_transaction,
    sort_rules,
)

__all__ = [
    # Model Provider Interface
    "ChatModelProvider",
    # Pipeline stages
    "build_prompts",
    "extract_json",
    "format_amount",
    "match_transaction",
    "parse_ai_response",
    "reconcile_account",
    "resolve_template",
    "sort_rules",
    # Orchestrator
    "TransactionClassificationService",
]
