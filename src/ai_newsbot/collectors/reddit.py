"""Reddit feed collector."""

import html
import logging
import re
from typing import Any
from urllib.parse import urlparse

import feedparser
import httpx

from ai_newsbot.config import settings
from ai_newsbot.errors import CollectionError
from ai_newsbot.models import Item, SourceConfig

logger = logging.getLogger(__name__)

PERMALINK_ID_RE = re.compile(r"/comments/([a-zA-Z0-9]+)/")
POST_BODY_RE = re.compile(r'<div class="md">(.*)</div>', re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")
IMG_SRC_RE = re.compile(r'<(?:img|video|source)[^>]+src="([^"]+)"', re.IGNORECASE)
LINK_HREF_RE = re.compile(r'<a[^>]+href="([^"]+)"', re.IGNORECASE)

MEDIA_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif", ".mp4", ".mov", ".avi")


class RedditCollector:
    """Collector for subreddit Atom feeds.

    Sources are fetched one after another. A failure on any source fails the
    whole fetch so a run never works from a partial listing.
    """

    def __init__(
        self,
        sources: list[SourceConfig],
        max_posts_per_source: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sources = sources
        self.max_posts = max_posts_per_source or settings.max_posts_per_source
        self.timeout = timeout or settings.collection_timeout
        self._transport = transport

    async def fetch(self) -> list[Item]:
        """Collect posts from every configured source.

        Returns:
            All posts, in source order then feed order

        Raises:
            CollectionError: if any source cannot be fetched or parsed
        """
        items: list[Item] = []
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        ) as client:
            for source in self.sources:
                items.extend(await self._fetch_source(client, source))

        logger.info(f"Collected {len(items)} posts from {len(self.sources)} sources")
        return items

    async def _fetch_source(self, client: httpx.AsyncClient, source: SourceConfig) -> list[Item]:
        try:
            response = await client.get(source.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CollectionError(
                f"HTTP {e.response.status_code} fetching {source.name}"
            ) from e
        except httpx.RequestError as e:
            raise CollectionError(f"Request error fetching {source.name}: {e}") from e

        feed = feedparser.parse(response.text)
        if feed.bozo and not feed.entries:
            raise CollectionError(f"Feed parse error for {source.name}: {feed.bozo_exception}")

        items = []
        for entry in feed.entries[: self.max_posts]:
            item = self._parse_entry(entry, source)
            if item:
                items.append(item)

        logger.info(f"Collected {len(items)} posts from {source.name}")
        return items

    def _parse_entry(self, entry: Any, source: SourceConfig) -> Item | None:
        """Parse a feed entry into an Item.

        Returns:
            Item or None if the entry has no usable id or title
        """
        try:
            source_id = self._extract_id(entry)
            title = html.unescape(entry.get("title", "")).strip()
            if not source_id or not title:
                return None

            content = ""
            if entry.get("content"):
                content = entry.content[0].get("value", "")
            elif "summary" in entry:
                content = entry.summary

            return Item(
                source_id=source_id,
                title=title,
                body=self._extract_body(content),
                media_refs=self._extract_media(entry, content),
            )

        except Exception as e:
            logger.debug(f"Failed to parse entry from {source.name}: {e}")
            return None

    def _extract_id(self, entry: Any) -> str:
        """Reddit id from the Atom id (t3_xxxxx) or the permalink."""
        entry_id = entry.get("id", "")
        if entry_id.startswith("t3_"):
            return entry_id[3:]

        match = PERMALINK_ID_RE.search(entry.get("link", ""))
        if match:
            return match.group(1)
        return ""

    def _extract_body(self, content: str) -> str:
        """Self-post text with tags removed and paragraphs kept."""
        match = POST_BODY_RE.search(content)
        if not match:
            return ""

        text = match.group(1)
        text = re.sub(r"(?i)<br\s*/?>|</p>|</li>", "\n", text)
        text = TAG_RE.sub("", text)
        text = html.unescape(text)
        lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
        return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()

    def _extract_media(self, entry: Any, content: str) -> list[str]:
        """Media URLs in document order, without duplicates."""
        candidates = IMG_SRC_RE.findall(content)
        candidates += [
            href for href in LINK_HREF_RE.findall(content) if self._is_media_url(href)
        ]
        for thumb in entry.get("media_thumbnail", []) or []:
            if thumb.get("url"):
                candidates.append(thumb["url"])

        urls: list[str] = []
        for url in candidates:
            url = html.unescape(url).strip()
            if url.startswith("http") and url not in urls:
                urls.append(url)
        return urls

    @staticmethod
    def _is_media_url(url: str) -> bool:
        path = urlparse(html.unescape(url)).path.lower()
        return path.endswith(MEDIA_EXTENSIONS)
