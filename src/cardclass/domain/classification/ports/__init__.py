"""Classification domain ports."""

from cardclass.domain.classification.ports.model_provider_factory import (
    ModelProviderFactory,
)

__all__ = ["ModelProviderFactory"]
