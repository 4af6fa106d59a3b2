"""OpenAI-compatible chat completion provider.

Generic HTTP transport for any endpoint that accepts a chat-completions style
POST and answers with ``{"choices": [{"message": {"content": ...}}]}``.
Used for EXAONE, which authenticates with an ``x-api-key`` header.
"""

import json
import logging
from typing import Any, Optional

import httpx

from cardclass.domain.classification.exceptions import TransportError
from cardclass.domain.classification.services import ChatModelProvider

logger = logging.getLogger(__name__)


class OpenAICompatibleChatProvider(ChatModelProvider):
    """Chat model provider speaking the OpenAI chat-completions wire format."""

    def __init__(  # NOQA: PLR0913
        self,
        api_url: str,
        api_key: str,
        model: str,
        api_key_header: str = "x-api-key",
        request_model: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url
        self._api_key = api_key
        self._api_key_header = api_key_header
        self._model = model
        self._request_model = request_model
        self._timeout = timeout
        self._transport = transport

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "openai-compatible"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
    ) -> str:
        payload = self._build_payload(system_prompt, user_prompt, temperature)

        try:
            response = await self._post(payload)
        except httpx.TimeoutException as e:
            logger.warning(
                "Request to %s timed out after %.1fs",
                self._api_url,
                self._timeout,
            )
            raise TransportError(
                provider=self.provider_name,
                reason=f"timed out after {self._timeout:.1f}s",
            ) from e
        except httpx.HTTPError as e:
            logger.warning(
                "Request to %s failed: %s (type: %s)",
                self._api_url,
                str(e) or repr(e),
                type(e).__name__,
            )
            raise TransportError(
                provider=self.provider_name,
                reason=str(e) or type(e).__name__,
            ) from e

        if not response.is_success:
            logger.warning(
                "Chat endpoint returned error %d: %s",
                response.status_code,
                response.text[:200] if response.text else "no body",
            )
            raise TransportError(
                provider=self.provider_name,
                reason=response.text or response.reason_phrase,
                status_code=response.status_code,
                body=response.text,
            )

        return self._extract_content(response)

    def _build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "stream": False,
            "temperature": temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if self._request_model:
            payload["model"] = self._request_model
        return payload

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            self._api_key_header: self._api_key,
        }
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            return await client.post(self._api_url, json=payload, headers=headers)

    def _extract_content(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise TransportError(
                provider=self.provider_name,
                reason="응답이 JSON 형식이 아닙니다",
                status_code=response.status_code,
                body=response.text,
            ) from e

        text = None
        choices = data.get("choices") if isinstance(data, dict) else None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                text = message.get("content")

        if not text or not isinstance(text, str):
            raise TransportError(
                provider=self.provider_name,
                reason="API 응답에서 텍스트를 찾을 수 없습니다",
                status_code=response.status_code,
                body=response.text,
            )
        return text
