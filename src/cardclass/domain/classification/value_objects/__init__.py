"""Classification domain value objects."""

from cardclass.domain.classification.value_objects.account import Account
from cardclass.domain.classification.value_objects.ai_classification_response import (
    AIClassificationResponse,
)
from cardclass.domain.classification.value_objects.card_transaction import (
    CardTransaction,
    CardType,
)
from cardclass.domain.classification.value_objects.classification_context import (
    ClassificationContext,
)
from cardclass.domain.classification.value_objects.classification_rule import (
    ClassificationRule,
)
from cardclass.domain.classification.value_objects.classify_result import (
    ClassificationMethod,
    ClassifyResult,
)
from cardclass.domain.classification.value_objects.confirmed_example import (
    ConfirmedExample,
)
from cardclass.domain.classification.value_objects.model_config import (
    ModelConfig,
    ModelProvider,
)
from cardclass.domain.classification.value_objects.prompt_templates import (
    BuiltPrompts,
    PromptTemplates,
)
from cardclass.domain.classification.value_objects.rule_conditions import (
    RuleConditions,
)
from cardclass.domain.classification.value_objects.rule_match_result import (
    RuleMatchResult,
)

__all__ = [
    # Inputs
    "Account",
    "CardTransaction",
    "CardType",
    "ConfirmedExample",
    # Rules
    "ClassificationRule",
    "RuleConditions",
    "RuleMatchResult",
    # Prompting
    "BuiltPrompts",
    "ClassificationContext",
    "ModelConfig",
    "ModelProvider",
    "PromptTemplates",
    # Results
    "AIClassificationResponse",
    "ClassificationMethod",
    "ClassifyResult",
]
