"""Model provider factory port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional

from cardclass.domain.classification.services.chat_model_provider import (
    ChatModelProvider,
)


class ModelProviderFactory(ABC):
    """
    Resolves a model id to a ready-to-call provider.

    Implementations own credentials and transport selection. The classifier
    only hands over the model id chosen for the invocation.
    """

    @abstractmethod
    def get_provider(self, model_id: Optional[str] = None) -> ChatModelProvider:
        """
        Return the provider for ``model_id``.

        Parameters
        ----------
        model_id
            Registered model id; None selects the configured default

        Raises
        ------
        ConfigurationError
            If the model is unknown or its credentials are missing
        """
