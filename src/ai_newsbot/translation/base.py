"""Translation client interface and the paced batch translator."""

import asyncio
import logging
import re
from collections.abc import Sequence
from typing import Protocol

from ai_newsbot.config import settings
from ai_newsbot.errors import EmptyInput, EmptyResult, InvalidInput, ServiceError

logger = logging.getLogger(__name__)

HEALTH_CHECK_TEXT = "Hello, world!"

LANGUAGE_NAMES = {
    "ru": "Russian",
    "uk": "Ukrainian",
    "en": "English",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
}

PROMPT_TEMPLATE = (
    "Translate the following text into {language}. Preserve the original formatting "
    "and structure. Translate only the content and do not add any comments or "
    "explanations:\n\n{text}"
)

# Labels for a post translated as one text, in English and as translated to Russian
TITLE_LABEL = "TITLE"
BODY_LABEL = "CONTENT"
LABEL_PREFIX_RE = re.compile(
    r"^\s*(?:TITLE|CONTENT|ЗАГОЛОВОК|СОДЕРЖАНИЕ)\s*:\s*", re.IGNORECASE
)


def build_prompt(text: str, target_language: str) -> str:
    """Translation prompt for LLM-backed clients."""
    language = LANGUAGE_NAMES.get(target_language, target_language)
    return PROMPT_TEMPLATE.format(language=language, text=text)


def require_text(text: str) -> str:
    """Reject blank input before any call is made."""
    if not text or not text.strip():
        raise EmptyInput("text cannot be empty")
    return text


class TranslationClient(Protocol):
    """A single-text translation backend."""

    async def translate(self, text: str) -> str:
        """Translate one text into the target language.

        Raises:
            EmptyInput: text is blank
            ServiceError: the service returned a failure
            EmptyResult: the service returned no usable translation
        """
        ...

    async def health_check(self) -> None:
        """Raise ServiceError unless a known-good translation succeeds."""
        ...


async def check_client_health(client: TranslationClient) -> None:
    """Shared health check: translate a fixed string."""
    try:
        await client.translate(HEALTH_CHECK_TEXT)
    except ServiceError:
        raise
    except Exception as e:
        raise ServiceError(f"health check failed: {e}") from e


class BatchTranslator:
    """Sequential translator that paces calls to respect a rate limit.

    Cancellation comes from the calling task: cancelling it, or a deadline set
    with ``asyncio.timeout``, interrupts the current call or pacing wait and
    no further calls are issued.
    """

    def __init__(self, client: TranslationClient, interval: float | None = None):
        self.client = client
        self.interval = settings.translation_interval if interval is None else interval

    async def translate(self, text: str) -> str:
        """Translate a single text.

        Args:
            text: Source-language text

        Returns:
            Non-empty translated text
        """
        require_text(text)
        translated = await self.client.translate(text)
        if not translated or not translated.strip():
            raise EmptyResult("empty translation returned")
        return translated

    async def translate_post(self, title: str, body: str) -> tuple[str, str]:
        """Translate a post's title and body in a single call.

        Posts without body text (links, images, videos) translate the title
        alone. Otherwise both are sent as one labelled text so the model sees
        the title in context, and the reply is split back on the first blank
        line. A reply that cannot be split keeps the original title and uses
        the whole translation as the body.

        Args:
            title: Source-language title
            body: Source-language body, possibly blank

        Returns:
            Tuple of (translated title, translated body)

        Raises:
            EmptyInput: title and body are both blank
        """
        if not body or not body.strip():
            return (await self.translate(title)).strip(), ""

        combined = f"{TITLE_LABEL}: {title}\n\n{BODY_LABEL}: {body}"
        translated = await self.translate(combined)

        head, sep, rest = translated.strip().partition("\n\n")
        if not sep:
            return title, translated.strip()

        translated_title = LABEL_PREFIX_RE.sub("", head).strip() or title
        translated_body = LABEL_PREFIX_RE.sub("", rest).strip()
        if not translated_body:
            raise EmptyResult("translation lost the post body")
        return translated_title, translated_body

    async def translate_batch(self, texts: Sequence[str]) -> list[str]:
        """Translate texts in order, all or nothing.

        The first text is sent immediately; every later one waits
        ``interval`` seconds first. The first failure aborts the batch.

        Args:
            texts: Non-empty sequence of texts

        Returns:
            Translations with the same length and order as ``texts``

        Raises:
            InvalidInput: texts is empty
        """
        if not texts:
            raise InvalidInput("no texts to translate")

        results: list[str] = []
        for i, text in enumerate(texts):
            if i > 0:
                await asyncio.sleep(self.interval)
            try:
                results.append(await self.translate(text))
            except Exception as e:
                logger.warning(f"Batch translation failed at text {i}: {e}")
                raise

        logger.debug(f"Translated batch of {len(results)} texts")
        return results

    async def health_check(self) -> None:
        """Check the underlying client."""
        await self.client.health_check()
