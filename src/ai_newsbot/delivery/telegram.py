"""Telegram delivery via the Bot API."""

import logging
from typing import Any, ClassVar
from urllib.parse import urlparse

import httpx

from ai_newsbot.config import settings
from ai_newsbot.errors import ServiceError
from ai_newsbot.models import Item

logger = logging.getLogger(__name__)


class TelegramPublisher:
    """Send translated posts to a Telegram chat."""

    TEXT_LIMIT = 4096
    CAPTION_LIMIT = 1024
    TITLE_LIMIT = 256

    # Bot API method and payload field per media kind
    MEDIA_METHODS: ClassVar[dict[str, tuple[str, str]]] = {
        "photo": ("sendPhoto", "photo"),
        "video": ("sendVideo", "video"),
        "animation": ("sendAnimation", "animation"),
    }
    MEDIA_EXTENSIONS: ClassVar[dict[str, tuple[str, ...]]] = {
        "photo": (".jpg", ".jpeg", ".png", ".webp"),
        "video": (".mp4", ".mov", ".avi"),
        "animation": (".gif",),
    }

    # MarkdownV2 reserved characters, backslash first
    MARKDOWN_SPECIAL = "\\_*[]()~`>#+-=|{}.!"
    ELLIPSIS = "…"

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: int | None = None,
        api_base: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.bot_token = bot_token or settings.telegram_bot_token
        self.chat_id = chat_id if chat_id is not None else settings.telegram_chat_id
        if not self.bot_token or self.chat_id is None:
            raise ValueError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID are required for delivery")
        self.api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self.timeout = timeout or settings.publish_timeout
        self._transport = transport

    async def deliver(self, item: Item) -> None:
        """Send one post, with its first media attachment if it has one.

        Raises:
            ServiceError: Telegram rejected the message
        """
        media_kind = self._media_kind(item.media_refs[0]) if item.media_refs else None

        if media_kind:
            method, field = self.MEDIA_METHODS[media_kind]
            payload = {
                field: item.media_refs[0],
                "caption": self.format_message(item, self.CAPTION_LIMIT),
            }
        else:
            method = "sendMessage"
            payload = {"text": self.format_message(item, self.TEXT_LIMIT)}

        payload.update({"chat_id": self.chat_id, "parse_mode": "MarkdownV2"})
        await self._call(method, payload)
        logger.info(f"Delivered post {item.source_id} via {method}")

    async def health_check(self) -> None:
        """Check the bot token with getMe."""
        await self._call("getMe", {})

    def format_message(self, item: Item, limit: int) -> str:
        """Format a post as MarkdownV2 within a length limit.

        Args:
            item: Ready item
            limit: Telegram limit for the text or caption

        Returns:
            Bold title followed by the translated body
        """
        title = item.translated_title or item.title
        header = ""
        if title:
            header = f"📰 *{self._fit(title, self.TITLE_LIMIT)}*\n\n"

        if not item.translated_body:
            return header.rstrip()
        return header + self._fit(item.translated_body, limit - len(header))

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.api_base}/bot{self.bot_token}/{method}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(url, json=payload)

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400 or not data.get("ok"):
            description = data.get("description") or response.text[:200]
            raise ServiceError(
                f"Telegram {method} failed: {description}", status_code=response.status_code
            )
        return data

    def _media_kind(self, url: str) -> str | None:
        path = urlparse(url).path.lower()
        for kind, extensions in self.MEDIA_EXTENSIONS.items():
            if path.endswith(extensions):
                return kind
        return None

    def _escape_markdown(self, text: str) -> str:
        for char in self.MARKDOWN_SPECIAL:
            text = text.replace(char, "\\" + char)
        return text

    def _fit(self, text: str, limit: int) -> str:
        """Escape text, truncating the raw text so the escaped form fits."""
        escaped = self._escape_markdown(text)
        if len(escaped) <= limit:
            return escaped

        budget = max(limit - len(self.ELLIPSIS), 0)
        cut = text[:budget]
        overflow = len(self._escape_markdown(cut)) - budget
        if overflow > 0:
            cut = cut[:-overflow]
        return self._escape_markdown(cut.rstrip()) + self.ELLIPSIS
