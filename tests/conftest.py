"""Pytest fixtures and test doubles."""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ai_newsbot.errors import ServiceError
from ai_newsbot.models import Item
from ai_newsbot.translation.base import BODY_LABEL, TITLE_LABEL

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeCollector:
    """Returns a fixed list of items, or raises."""

    def __init__(self, items: list[Item] | None = None, error: Exception | None = None):
        self.items = items or []
        self.error = error
        self.calls = 0

    async def fetch(self) -> list[Item]:
        self.calls += 1
        if self.error:
            raise self.error
        return [item.model_copy() for item in self.items]


class MemoryStore:
    """In-memory item store with per-operation failure injection."""

    def __init__(self):
        self.items: dict[str, Item] = {}
        self.fail_exists: set[str] = set()
        self.fail_upsert: set[str] = set()
        self.fail_mark: set[str] = set()
        self.fail_list = False
        self.upserted: list[str] = []
        self._tick = 0

    async def exists(self, source_id: str) -> bool:
        if source_id in self.fail_exists:
            raise RuntimeError("store unavailable")
        return source_id in self.items

    async def upsert(self, item: Item) -> None:
        self.upserted.append(item.source_id)
        if item.source_id in self.fail_upsert:
            raise RuntimeError("disk full")

        existing = self.items.get(item.source_id)
        if existing:
            created_at = existing.created_at
        else:
            self._tick += 1
            created_at = item.created_at or BASE_TIME + timedelta(seconds=self._tick)
        self.items[item.source_id] = item.model_copy(
            update={
                "created_at": created_at,
                "published_at": existing.published_at if existing else None,
            }
        )

    async def list_ready(self) -> list[Item]:
        if self.fail_list:
            raise RuntimeError("query failed")
        ready = [item for item in self.items.values() if item.is_ready]
        return sorted(ready, key=lambda item: item.created_at)

    async def mark_published(self, source_id: str) -> None:
        if source_id in self.fail_mark:
            raise RuntimeError("write failed")
        self.items[source_id] = self.items[source_id].model_copy(
            update={"published_at": datetime.now(timezone.utc)}
        )


def _fake_translate(paragraph: str) -> str:
    label, sep, rest = paragraph.partition(": ")
    if sep and label in (TITLE_LABEL, BODY_LABEL):
        return f"{label}: [ru] {rest}"
    return f"[ru] {paragraph}"


class FakeTranslationClient:
    """Records calls; fails or stalls on texts containing chosen markers.

    Each paragraph comes back prefixed with "[ru] ", after any TITLE:/CONTENT:
    label, the way a model keeps the structure of a labelled post.
    """

    def __init__(self):
        self.calls: list[str] = []
        self.call_times: list[float] = []
        self.fail_on: set[str] = set()
        self.delays: dict[str, float] = {}

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        self.call_times.append(time.monotonic())
        for marker, delay in self.delays.items():
            if marker in text:
                await asyncio.sleep(delay)
        if any(marker in text for marker in self.fail_on):
            raise ServiceError("API request failed with status 429", status_code=429)
        return "\n\n".join(_fake_translate(part) for part in text.split("\n\n"))

    async def health_check(self) -> None:
        await self.translate("Hello, world!")


class FakePublisher:
    """Records delivered item ids; fails on chosen ids."""

    def __init__(self):
        self.delivered: list[str] = []
        self.attempted: list[str] = []
        self.fail_ids: set[str] = set()

    async def deliver(self, item: Item) -> None:
        self.attempted.append(item.source_id)
        if item.source_id in self.fail_ids:
            raise ServiceError("Telegram sendMessage failed: Bad Request", status_code=400)
        self.delivered.append(item.source_id)


def _make_item(source_id: str, **kwargs) -> Item:
    defaults = {
        "title": f"Post {source_id}",
        "body": f"Body of post {source_id}",
    }
    defaults.update(kwargs)
    return Item(source_id=source_id, **defaults)


@pytest.fixture
def make_item():
    """Factory for items with sensible defaults."""
    return _make_item


@pytest.fixture
def sample_item() -> Item:
    """Create a sample untranslated item."""
    return Item(
        source_id="1abcde",
        title="New open-weights model tops the leaderboard",
        body="Researchers released a new model today.",
        media_refs=["https://i.redd.it/abc.jpg"],
    )


@pytest.fixture
def collector() -> FakeCollector:
    return FakeCollector()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def translation_client() -> FakeTranslationClient:
    return FakeTranslationClient()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test_newsbot.db"
