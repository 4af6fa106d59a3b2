"""Registered AI models and provider construction.

The registry maintains the curated list of models the classifier can use.
Credentials and endpoint URLs are resolved from settings at provider
construction time, never stored in the registry itself.
"""

import logging
from typing import ClassVar, Optional

from cardclass.domain.classification.exceptions import (
    MissingCredentialsError,
    UnknownModelError,
)
from cardclass.domain.classification.ports import ModelProviderFactory
from cardclass.domain.classification.services import ChatModelProvider
from cardclass.domain.classification.value_objects import ModelConfig, ModelProvider
from cardclass.infrastructure.integration.ai.anthropic_chat_provider import (
    AnthropicChatProvider,
)
from cardclass.infrastructure.integration.ai.openai_compatible_chat_provider import (
    OpenAICompatibleChatProvider,
)
from cardclass_config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "claude-sonnet"

AI_MODELS: dict[str, ModelConfig] = {
    "claude-sonnet": ModelConfig(
        id="claude-sonnet",
        name="Claude Sonnet 4",
        provider=ModelProvider.ANTHROPIC,
        description="Anthropic Claude Sonnet - 높은 정확도",
        model_id="claude-sonnet-4-20250514",
    ),
    "exaone-35-7-8b": ModelConfig(
        id="exaone-35-7-8b",
        name="EXAONE 3.5 7.8B",
        provider=ModelProvider.OPENAI_COMPATIBLE,
        description="LG AI Research EXAONE - 빠른 응답",
        api_key_header="x-api-key",
    ),
}


def get_model_config(model_id: str) -> Optional[ModelConfig]:
    return AI_MODELS.get(model_id)


def list_models() -> list[ModelConfig]:
    return list(AI_MODELS.values())


class SettingsModelProviderFactory(ModelProviderFactory):
    """Builds providers for registered models using application settings."""

    # Environment variables named in configuration errors
    _ENV_NAMES: ClassVar[dict[str, str]] = {
        "anthropic_api_key": "ANTHROPIC_API_KEY",
        "exaone_api_url": "EXAONE_API_URL",
        "exaone_api_key": "EXAONE_API_KEY",
    }

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._providers: dict[str, ChatModelProvider] = {}

    def get_provider(self, model_id: Optional[str] = None) -> ChatModelProvider:
        model_id = model_id or self._settings.default_model_id
        provider = self._providers.get(model_id)
        if provider is None:
            provider = self._build_provider(model_id)
            self._providers[model_id] = provider
        return provider

    def _build_provider(self, model_id: str) -> ChatModelProvider:
        config = get_model_config(model_id)
        if config is None:
            raise UnknownModelError(model_id)

        if config.provider == ModelProvider.ANTHROPIC:
            return self._build_anthropic(config)
        return self._build_openai_compatible(config)

    def _build_anthropic(self, config: ModelConfig) -> ChatModelProvider:
        api_key = self._settings.anthropic_api_key
        if api_key is None or not api_key.get_secret_value():
            raise MissingCredentialsError(
                config.id, [self._ENV_NAMES["anthropic_api_key"]]
            )

        logger.info("Using Anthropic model %s", config.model_id)
        return AnthropicChatProvider(
            api_key=api_key.get_secret_value(),
            model=config.model_id or "claude-sonnet-4-20250514",
            max_tokens=self._settings.ai_max_tokens,
            timeout=self._settings.ai_timeout,
        )

    def _build_openai_compatible(self, config: ModelConfig) -> ChatModelProvider:
        api_url = config.api_url or self._settings.exaone_api_url
        api_key = self._settings.exaone_api_key

        missing = []
        if not api_url:
            missing.append(self._ENV_NAMES["exaone_api_url"])
        if api_key is None or not api_key.get_secret_value():
            missing.append(self._ENV_NAMES["exaone_api_key"])
        if missing:
            raise MissingCredentialsError(config.id, missing)

        logger.info("Using OpenAI-compatible model %s at %s", config.id, api_url)
        return OpenAICompatibleChatProvider(
            api_url=api_url,
            api_key=api_key.get_secret_value(),
            model=config.id,
            api_key_header=config.api_key_header or "x-api-key",
            request_model=config.model_id,
            timeout=self._settings.ai_timeout,
        )
