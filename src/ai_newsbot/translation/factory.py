"""Translation backend selection."""

from ai_newsbot.config import Settings, settings as default_settings
from ai_newsbot.translation.base import TranslationClient


def create_translation_client(settings: Settings | None = None) -> TranslationClient:
    """Create the translation client named by ``settings.translation_backend``.

    Raises:
        ValueError: unknown backend, or credentials missing for it
    """
    settings = settings or default_settings
    backend = settings.translation_backend.lower()

    if backend == "openrouter":
        from ai_newsbot.translation.openrouter import OpenRouterTranslator

        return OpenRouterTranslator(
            api_key=settings.openrouter_api_key,
            model=settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            target_language=settings.target_language,
            timeout=settings.translation_timeout,
        )
    if backend == "claude":
        from ai_newsbot.translation.claude import ClaudeTranslator

        return ClaudeTranslator(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            target_language=settings.target_language,
        )
    if backend == "google":
        from ai_newsbot.translation.google import GoogleTranslateClient

        return GoogleTranslateClient(target_language=settings.target_language)

    raise ValueError(f"Unknown translation backend: {settings.translation_backend}")
