"""Application configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default=Path("data"), description="Directory for data storage")
    db_path: Path = Field(default=Path("data/newsbot.db"), description="SQLite database path")
    sources_file: Path | None = Field(
        default=None, description="YAML feed list (defaults to the bundled feeds.yaml)"
    )

    # Collection Settings
    reddit_urls: str = Field(
        default="", description="Comma-separated feed URLs overriding the sources file"
    )
    max_posts_per_source: int = Field(default=25, description="Max posts to take per feed")
    collection_timeout: float = Field(
        default=30.0, description="Timeout for each feed request (seconds)"
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; AI-NewsBot/1.0)", description="HTTP User-Agent"
    )

    # Translation
    translation_backend: str = Field(
        default="openrouter", description="Translation backend: openrouter, claude or google"
    )
    target_language: str = Field(default="ru", description="Target language code")
    translation_interval: float = Field(
        default=1.0, description="Pause between consecutive batch translation calls (seconds)"
    )
    translation_timeout: float = Field(
        default=60.0, description="Timeout for a single translation request (seconds)"
    )

    # OpenRouter
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key")
    openrouter_model: str = Field(
        default="deepseek/deepseek-r1-0528:free", description="OpenRouter model name"
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )

    # Claude API
    anthropic_api_key: str | None = Field(default=None, description="Anthropic API key")
    claude_model: str = Field(
        default="claude-sonnet-4-20250514", description="Claude model for translation"
    )

    # Telegram
    telegram_bot_token: str | None = Field(default=None, description="Telegram bot token")
    telegram_chat_id: int | None = Field(default=None, description="Destination chat ID")
    telegram_api_base: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API base URL"
    )
    publish_timeout: float = Field(
        default=30.0, description="Timeout for a single publish request (seconds)"
    )

    # Run Settings
    run_timeout: float = Field(default=1800.0, description="Deadline for one pipeline run")
    run_interval_minutes: int = Field(
        default=60, description="Minutes between runs in --loop mode"
    )

    @property
    def reddit_url_list(self) -> list[str]:
        """Parse feed URL overrides into a list."""
        if not self.reddit_urls:
            return []
        return [u.strip() for u in self.reddit_urls.split(",") if u.strip()]


settings = Settings()
