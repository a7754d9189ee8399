"""Google Translate client (no API key needed)."""

import asyncio
import logging

from deep_translator import GoogleTranslator
from deep_translator.exceptions import TranslationNotFound

from ai_newsbot.config import settings
from ai_newsbot.errors import EmptyResult, ServiceError
from ai_newsbot.translation.base import check_client_health, require_text

logger = logging.getLogger(__name__)


class GoogleTranslateClient:
    """Translate with the free Google Translate endpoint via deep-translator."""

    def __init__(self, target_language: str | None = None, source_language: str = "auto"):
        self.source = source_language
        self.target = target_language or settings.target_language

    async def translate(self, text: str) -> str:
        require_text(text)
        # deep-translator is blocking
        return await asyncio.to_thread(self._translate_sync, text)

    def _translate_sync(self, text: str) -> str:
        try:
            translator = GoogleTranslator(source=self.source, target=self.target)
            translated = translator.translate(text)
        except TranslationNotFound as e:
            raise EmptyResult(f"translation not found: {e}") from e
        except Exception as e:
            raise ServiceError(f"Google translation error: {e}") from e

        if not translated or not str(translated).strip():
            raise EmptyResult("empty translation returned")
        logger.debug(f"Translated {len(text)} chars to {self.target}")
        return str(translated).strip()

    async def health_check(self) -> None:
        await check_client_health(self)
