"""OpenRouter translation client."""

import logging

import httpx

from ai_newsbot.config import settings
from ai_newsbot.errors import EmptyResult, ServiceError
from ai_newsbot.translation.base import build_prompt, check_client_health, require_text

logger = logging.getLogger(__name__)


class OpenRouterTranslator:
    """Translate through OpenRouter's chat-completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        target_language: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.openrouter_api_key
        if not self.api_key:
            raise ValueError("OPENROUTER_API_KEY is required for translation")
        self.model = model or settings.openrouter_model
        self.base_url = (base_url or settings.openrouter_base_url).rstrip("/")
        self.target_language = target_language or settings.target_language
        # Reasoning models can be slow
        self.timeout = timeout or settings.translation_timeout
        self._transport = transport

    async def translate(self, text: str) -> str:
        require_text(text)

        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": build_prompt(text, self.target_language)},
            ],
            "stream": False,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": "https://github.com/w1zzzle/ai-newsbot",
            "X-Title": "AI News Bot",
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions", json=payload, headers=headers
            )

        if response.status_code != httpx.codes.OK:
            raise ServiceError(
                f"API request failed with status {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(f"invalid JSON response: {e}") from e

        error = data.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ServiceError(f"API error: {message}")

        choices = data.get("choices") or []
        if not choices:
            raise EmptyResult("no translation choices returned")

        translated = ((choices[0].get("message") or {}).get("content") or "").strip()
        if not translated:
            raise EmptyResult("empty translation returned")

        logger.debug(f"Translated {len(text)} chars with {self.model}")
        return translated

    async def health_check(self) -> None:
        await check_client_health(self)
