"""Tests for storage module."""

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ai_newsbot.models import Item, PipelineStats
from ai_newsbot.storage import ItemDatabase

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestItemDatabase:
    """Tests for ItemDatabase."""

    @pytest.fixture
    def db(self, temp_db_path: Path) -> ItemDatabase:
        """Create a test database."""
        return ItemDatabase(db_path=temp_db_path)

    def create_item(self, source_id: str, translated: str = "перевод", **kwargs) -> Item:
        """Helper to create test items."""
        return Item(
            source_id=source_id,
            title=f"Title {source_id}",
            body=f"Body {source_id}",
            translated_body=translated,
            **kwargs,
        )

    def test_init_creates_tables(self, db: ItemDatabase):
        """Test that database initialization creates required tables."""
        conn = sqlite3.connect(db.db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in cursor.fetchall()}

        assert "items" in tables
        assert "pipeline_runs" in tables
        conn.close()

    @pytest.mark.asyncio
    async def test_exists_after_upsert(self, db: ItemDatabase):
        """Test existence check by source id."""
        assert not await db.exists("abc")

        await db.upsert(self.create_item("abc"))

        assert await db.exists("abc")
        assert not await db.exists("xyz")

    @pytest.mark.asyncio
    async def test_upsert_round_trips_fields(self, db: ItemDatabase):
        """Test that every stored field comes back."""
        item = self.create_item(
            "abc", media_refs=["https://i.redd.it/1.jpg", "https://v.redd.it/2.mp4"]
        )
        await db.upsert(item)

        stored = db.get_item("abc")

        assert stored is not None
        assert stored.title == "Title abc"
        assert stored.body == "Body abc"
        assert stored.translated_body == "перевод"
        assert stored.media_refs == ["https://i.redd.it/1.jpg", "https://v.redd.it/2.mp4"]
        assert stored.published_at is None
        assert stored.created_at is not None

    @pytest.mark.asyncio
    async def test_upsert_keeps_created_and_published(self, db: ItemDatabase):
        """Test that an update never moves created_at or clears published_at."""
        await db.upsert(self.create_item("abc", created_at=T0))
        await db.mark_published("abc")

        await db.upsert(self.create_item("abc", translated="новый перевод"))
        stored = db.get_item("abc")

        assert stored.translated_body == "новый перевод"
        assert stored.created_at == T0
        assert stored.published_at is not None

    @pytest.mark.asyncio
    async def test_list_ready_orders_by_created_at(self, db: ItemDatabase):
        """Test that ready items come back oldest first regardless of insert order."""
        await db.upsert(self.create_item("t2", created_at=T0 + timedelta(minutes=2)))
        await db.upsert(self.create_item("t3", created_at=T0 + timedelta(minutes=3)))
        await db.upsert(self.create_item("t1", created_at=T0 + timedelta(minutes=1)))

        ready = await db.list_ready()

        assert [item.source_id for item in ready] == ["t1", "t2", "t3"]

    @pytest.mark.asyncio
    async def test_list_ready_filters(self, db: ItemDatabase):
        """Test that untranslated and published items are excluded."""
        await db.upsert(self.create_item("ready"))
        await db.upsert(self.create_item("untranslated", translated=""))
        await db.upsert(self.create_item("published"))
        await db.mark_published("published")

        ready = await db.list_ready()

        assert [item.source_id for item in ready] == ["ready"]

    @pytest.mark.asyncio
    async def test_unmarked_item_stays_ready(self, db: ItemDatabase):
        """Test that an item stays listed until it is marked published."""
        await db.upsert(self.create_item("abc"))

        assert [i.source_id for i in await db.list_ready()] == ["abc"]
        assert [i.source_id for i in await db.list_ready()] == ["abc"]

        await db.mark_published("abc")
        assert await db.list_ready() == []

    @pytest.mark.asyncio
    async def test_mark_published_unknown_id(self, db: ItemDatabase):
        """Test that marking a missing item is a no-op."""
        await db.mark_published("missing")
        assert db.get_item("missing") is None

    @pytest.mark.asyncio
    async def test_naive_created_at_treated_as_utc(self, db: ItemDatabase):
        """Test that naive timestamps sort with aware ones."""
        await db.upsert(self.create_item("aware", created_at=T0 + timedelta(hours=1)))
        await db.upsert(self.create_item("naive", created_at=T0.replace(tzinfo=None)))

        ready = await db.list_ready()

        assert [item.source_id for item in ready] == ["naive", "aware"]

    @pytest.mark.asyncio
    async def test_get_recent_items(self, db: ItemDatabase):
        """Test that recent items exclude old ones and come newest first."""
        now = datetime.now(timezone.utc)
        await db.upsert(self.create_item("old", created_at=now - timedelta(days=10)))
        await db.upsert(self.create_item("older_today", created_at=now - timedelta(hours=2)))
        await db.upsert(self.create_item("newest", created_at=now - timedelta(minutes=1)))

        recent = db.get_recent_items(days=1)

        assert [item.source_id for item in recent] == ["newest", "older_today"]

    def test_save_run_stats(self, db: ItemDatabase):
        """Test saving pipeline run statistics."""
        stats = PipelineStats(
            items_collected=30,
            items_ingested=5,
            items_skipped=1,
            items_published=4,
            errors=["item x skipped at translate: timeout"],
            duration_seconds=42.0,
        )

        db.save_run_stats(stats)

        assert db.get_stats(days=1)["pipeline_runs"] == 1

    @pytest.mark.asyncio
    async def test_get_stats(self, db: ItemDatabase):
        """Test getting statistics."""
        await db.upsert(self.create_item("a"))
        await db.upsert(self.create_item("b"))
        await db.upsert(self.create_item("c", translated=""))
        await db.mark_published("a")

        stats = db.get_stats()

        assert stats["total_items"] == 3
        assert stats["published_items"] == 1
        assert stats["ready_items"] == 1

    @pytest.mark.asyncio
    async def test_title_only_translation_is_ready(self, db: ItemDatabase):
        """Test that media posts with a translated title alone are listed."""
        await db.upsert(self.create_item("img", translated="", translated_title="Картинка"))

        ready = await db.list_ready()

        assert [item.source_id for item in ready] == ["img"]
        assert ready[0].translated_title == "Картинка"
        assert db.get_stats()["ready_items"] == 1

    def test_adds_translated_title_to_existing_database(self, temp_db_path: Path):
        """Test that a database created without translated titles is upgraded."""
        conn = sqlite3.connect(temp_db_path)
        conn.execute("""
            CREATE TABLE items (
                source_id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                body TEXT NOT NULL DEFAULT '',
                media_refs TEXT NOT NULL DEFAULT '[]',
                translated_body TEXT NOT NULL DEFAULT '',
                published_at TIMESTAMP,
                created_at TIMESTAMP NOT NULL
            )
        """)
        conn.execute(
            "INSERT INTO items (source_id, title, translated_body, created_at) "
            "VALUES ('old', 'Old post', 'перевод', '2024-05-01T12:00:00.000000+00:00')"
        )
        conn.commit()
        conn.close()

        db = ItemDatabase(db_path=temp_db_path)
        stored = db.get_item("old")

        assert stored.translated_title == ""
        assert stored.translated_body == "перевод"
        assert stored.is_ready
