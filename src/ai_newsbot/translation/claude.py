"""Claude translation client."""

import logging

import anthropic

from ai_newsbot.config import settings
from ai_newsbot.errors import EmptyResult, ServiceError
from ai_newsbot.translation.base import build_prompt, check_client_health, require_text

logger = logging.getLogger(__name__)


class ClaudeTranslator:
    """Translate posts using Claude."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        target_language: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        api_key = api_key or settings.anthropic_api_key
        if client is None and not api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for translation")
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key, timeout=settings.translation_timeout
        )
        self.model = model or settings.claude_model
        self.target_language = target_language or settings.target_language

    async def translate(self, text: str) -> str:
        require_text(text)

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=4096,
                messages=[
                    {"role": "user", "content": build_prompt(text, self.target_language)},
                ],
            )
        except anthropic.APIStatusError as e:
            raise ServiceError(f"Claude API error: {e.message}", status_code=e.status_code) from e
        except anthropic.APIError as e:
            raise ServiceError(f"Claude API error: {e}") from e

        translated = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not translated:
            raise EmptyResult("empty translation returned")
        logger.debug(f"Translated {len(text)} chars with {self.model}")
        return translated

    async def health_check(self) -> None:
        await check_client_health(self)
