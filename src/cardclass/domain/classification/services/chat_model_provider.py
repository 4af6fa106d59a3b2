"""Chat model provider interface."""

from abc import ABC, abstractmethod


class ChatModelProvider(ABC):
    """Abstract capability: send system and user text, receive text back.

    Implementations wrap one transport (a native SDK or an OpenAI-compatible
    HTTP endpoint). They raise ``TransportError`` on any failure and never
    retry; timeouts belong to the transport configuration, not the caller.
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
    ) -> str:
        """
        Send one system/user exchange and return the raw response text.

        Parameters
        ----------
        system_prompt
            Fully resolved system prompt (includes the format instruction)
        user_prompt
            Fully resolved user prompt
        temperature
            Sampling temperature; low values for consistent output

        Returns
        -------
        The model's text reply, unparsed.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """
        Provider-side model identifier (e.g., "claude-sonnet-4-20250514").

        Used for logging and stored with AI classifications.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the transport family (e.g., "anthropic")."""
