"""Anthropic-SDK based chat model provider.

Native transport: the official SDK returns a message object whose first
content block carries the reply text.
"""

import logging
from typing import Optional

import anthropic

from cardclass.domain.classification.exceptions import TransportError
from cardclass.domain.classification.services import ChatModelProvider

logger = logging.getLogger(__name__)


class AnthropicChatProvider(ChatModelProvider):
    """Chat model provider backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        timeout: float = 60.0,
        max_retries: int = 2,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
    ) -> str:
        try:
            message = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIStatusError as e:
            logger.warning(
                "Anthropic API returned error %d: %s", e.status_code, e.message
            )
            raise TransportError(
                provider=self.provider_name,
                reason=e.message,
                status_code=e.status_code,
                body=e.response.text if e.response is not None else None,
            ) from e
        except anthropic.APITimeoutError as e:
            logger.warning("Anthropic request timed out after %.1fs", self._timeout)
            raise TransportError(
                provider=self.provider_name,
                reason=f"timed out after {self._timeout:.1f}s",
            ) from e
        except anthropic.APIError as e:
            logger.warning(
                "Anthropic request failed: %s (type: %s)",
                str(e) or repr(e),
                type(e).__name__,
            )
            raise TransportError(
                provider=self.provider_name,
                reason=str(e) or type(e).__name__,
            ) from e

        if not message.content or message.content[0].type != "text":
            msg = "Unexpected response type from Claude API"
            raise TransportError(provider=self.provider_name, reason=msg)

        return message.content[0].text
