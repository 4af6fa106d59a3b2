"""AI transport adapters for transaction classification."""

from cardclass.infrastructure.integration.ai.anthropic_chat_provider import (
    AnthropicChatProvider,
)
from cardclass.infrastructure.integration.ai.model_registry import (
    AI_MODELS,
    DEFAULT_MODEL_ID,
    SettingsModelProviderFactory,
    get_model_config,
    list_models,
)
from cardclass.infrastructure.integration.ai.openai_compatible_chat_provider import (
    OpenAICompatibleChatProvider,
)

__all__ = [
    "AI_MODELS",
    "DEFAULT_MODEL_ID",
    "AnthropicChatProvider",
    "OpenAICompatibleChatProvider",
    "SettingsModelProviderFactory",
    "get_model_config",
    "list_models",
]
