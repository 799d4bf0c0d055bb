"""Chat assistant backed by the Gemini ``generateContent`` REST API."""

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from src.farmconnect.runtime.config.config_data import LLMConfig

DEFAULT_REPLY = "Sorry, I couldn't generate a response"


class ChatError(Exception):
    """A chat failure whose message is shown to the user as-is."""


class ChatMessage(BaseModel):
    role: str = ""
    content: str = ""


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    api_key: str | None = Field(default=None, alias="apiKey")

    model_config = {"populate_by_name": True}


def to_gemini_contents(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Map chat turns to Gemini contents; any non-user role becomes ``model``."""
    return [
        {
            "role": "user" if message.role == "user" else "model",
            "parts": [{"text": message.content}],
        }
        for message in messages
    ]


class ChatService:
    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/models/{self._config.model}:generateContent"

    def _payload(self, messages: list[ChatMessage]) -> dict[str, Any]:
        return {
            "contents": to_gemini_contents(messages),
            "generationConfig": {
                "temperature": self._config.temperature,
                "topK": self._config.top_k,
                "topP": self._config.top_p,
                "maxOutputTokens": self._config.max_output_tokens,
            },
        }

    async def _post(self, api_key: str, payload: dict[str, Any]) -> httpx.Response:
        params = {"key": api_key}
        if self._client is not None:
            return await self._client.post(self.endpoint, params=params, json=payload)
        async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
            return await client.post(self.endpoint, params=params, json=payload)

    async def reply(self, messages: list[ChatMessage], api_key: str | None = None) -> str:
        """Send the conversation upstream and return the assistant's text.

        Raises:
            ChatError: For missing input or configuration and any upstream failure
        """
        if not messages:
            raise ChatError("No messages provided")
        key = api_key or self._config.api_key
        if not key:
            raise ChatError("Gemini API key not configured")

        payload = self._payload(messages)
        logger.debug("Sending {} messages to Gemini", len(messages))
        try:
            response = await self._post(key, payload)
        except httpx.HTTPError as e:
            raise ChatError(f"Failed to reach Gemini API: {e}") from e

        if response.is_error:
            logger.error("Gemini API returned an error: {} {}", response.status_code, response.text)
            raise ChatError(f"Gemini API returned status {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ChatError("Invalid response format from Gemini API") from e

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else None
            raise ChatError(message or "Error from Gemini API")

        return _reply_text(data)


def _reply_text(data: Any) -> str:
    """First candidate's first text part; anything not shaped like that is invalid."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    candidate = candidates[0] if isinstance(candidates, list) and candidates else None
    content = candidate.get("content") if isinstance(candidate, dict) else None
    if not isinstance(content, dict) or not content:
        logger.error("Invalid response format from Gemini API: {}", data)
        raise ChatError("Invalid response format from Gemini API")

    parts = content.get("parts") or [{}]
    first = parts[0] if isinstance(parts, list) else None
    if not isinstance(first, dict):
        logger.error("Invalid response format from Gemini API: {}", data)
        raise ChatError("Invalid response format from Gemini API")
    text = first.get("text")
    return text if isinstance(text, str) and text else DEFAULT_REPLY
