"""AI model configuration value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ModelProvider(Enum):
    """Transport family used to reach a model."""

    ANTHROPIC = "anthropic"
    OPENAI_COMPATIBLE = "openai-compatible"


@dataclass(frozen=True)
class ModelConfig:
    """A model the classifier can be pointed at."""

    id: str
    name: str
    provider: ModelProvider
    description: str
    model_id: Optional[str] = None  # provider-side model name
    api_url: Optional[str] = None
    api_key_header: Optional[str] = None

    @property
    def uses_native_sdk(self) -> bool:
        return self.provider == ModelProvider.ANTHROPIC
