"""Translation clients and the batch translator."""

from ai_newsbot.translation.base import BatchTranslator, TranslationClient
from ai_newsbot.translation.factory import create_translation_client
from ai_newsbot.translation.openrouter import OpenRouterTranslator

__all__ = [
    "BatchTranslator",
    "OpenRouterTranslator",
    "TranslationClient",
    "create_translation_client",
]
