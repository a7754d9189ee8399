"""SQLite database for posts and their publishing state."""

import asyncio
import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

from ai_newsbot.config import settings
from ai_newsbot.models import Item, PipelineStats

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_db_time(value: datetime) -> str:
    """ISO timestamp in UTC so that text ordering matches time ordering."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class ItemDatabase:
    """SQLite-backed item store.

    The async store methods run their SQLite work in a worker thread, one
    connection per call.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or settings.db_path
        self._ensure_directory()
        self._init_db()

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS items (
                    source_id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL DEFAULT '',
                    media_refs TEXT NOT NULL DEFAULT '[]',
                    translated_title TEXT NOT NULL DEFAULT '',
                    translated_body TEXT NOT NULL DEFAULT '',
                    published_at TIMESTAMP,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Databases created before titles were translated
            columns = {row["name"] for row in cursor.execute("PRAGMA table_info(items)")}
            if "translated_title" not in columns:
                cursor.execute(
                    "ALTER TABLE items ADD COLUMN translated_title TEXT NOT NULL DEFAULT ''"
                )

            # Serves the ready listing
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_items_unpublished
                ON items(published_at, created_at)
            """)

            # Pipeline runs for monitoring
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS pipeline_runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_date TIMESTAMP NOT NULL,
                    items_collected INTEGER,
                    items_ingested INTEGER,
                    items_skipped INTEGER,
                    items_published INTEGER,
                    errors TEXT,
                    duration_seconds REAL
                )
            """)

            conn.commit()
            logger.info(f"Database initialized at {self.db_path}")

    # Store operations

    async def exists(self, source_id: str) -> bool:
        return await asyncio.to_thread(self._exists, source_id)

    async def upsert(self, item: Item) -> None:
        await asyncio.to_thread(self._upsert, item)

    async def list_ready(self) -> list[Item]:
        return await asyncio.to_thread(self.get_ready_items)

    async def mark_published(self, source_id: str) -> None:
        await asyncio.to_thread(self._mark_published, source_id)

    def _exists(self, source_id: str) -> bool:
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT 1 FROM items WHERE source_id = ?", (source_id,))
            return cursor.fetchone() is not None

    def _upsert(self, item: Item) -> None:
        created_at = item.created_at or _utcnow()
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO items
                (source_id, title, body, media_refs, translated_title, translated_body, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(source_id) DO UPDATE SET
                    title = excluded.title,
                    body = excluded.body,
                    media_refs = excluded.media_refs,
                    translated_title = excluded.translated_title,
                    translated_body = excluded.translated_body
                """,
                (
                    item.source_id,
                    item.title,
                    item.body,
                    json.dumps(item.media_refs),
                    item.translated_title,
                    item.translated_body,
                    _to_db_time(created_at),
                ),
            )
            conn.commit()

    def get_ready_items(self) -> list[Item]:
        """Translated, unpublished items, oldest first."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                SELECT * FROM items
                WHERE published_at IS NULL
                  AND (translated_title != '' OR translated_body != '')
                ORDER BY created_at ASC, rowid ASC
            """)
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def _mark_published(self, source_id: str) -> None:
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE items SET published_at = ? WHERE source_id = ?",
                (_to_db_time(_utcnow()), source_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                logger.warning(f"mark_published: no stored item {source_id}")

    # Read-side helpers for the CLI

    def get_item(self, source_id: str) -> Item | None:
        """Get a single item by id."""
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT * FROM items WHERE source_id = ?", (source_id,))
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def get_recent_items(self, days: int = 7, limit: int = 100) -> list[Item]:
        """Get items first stored in the last N days, newest first."""
        since = _utcnow() - timedelta(days=days)

        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT * FROM items
                WHERE created_at > ?
                ORDER BY created_at DESC
                LIMIT ?
                """,
                (_to_db_time(since), limit),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def save_run_stats(self, stats: PipelineStats) -> None:
        """Save pipeline run statistics."""
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO pipeline_runs
                (run_date, items_collected, items_ingested, items_skipped,
                 items_published, errors, duration_seconds)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    _to_db_time(_utcnow()),
                    stats.items_collected,
                    stats.items_ingested,
                    stats.items_skipped,
                    stats.items_published,
                    json.dumps(stats.errors),
                    stats.duration_seconds,
                ),
            )
            conn.commit()

    def get_stats(self, days: int = 30) -> dict:
        """Get storage and run statistics."""
        since = _to_db_time(_utcnow() - timedelta(days=days))

        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*) FROM items WHERE created_at > ?", (since,))
            total_items = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM items WHERE published_at > ?", (since,))
            published = cursor.fetchone()[0]

            cursor.execute(
                "SELECT COUNT(*) FROM items WHERE published_at IS NULL "
                "AND (translated_title != '' OR translated_body != '')"
            )
            ready = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM pipeline_runs WHERE run_date > ?", (since,))
            run_count = cursor.fetchone()[0]

            return {
                "total_items": total_items,
                "published_items": published,
                "ready_items": ready,
                "pipeline_runs": run_count,
                "period_days": days,
            }

    def _row_to_item(self, row: sqlite3.Row) -> Item:
        """Convert database row to Item."""
        return Item(
            source_id=row["source_id"],
            title=row["title"],
            body=row["body"],
            media_refs=json.loads(row["media_refs"] or "[]"),
            translated_title=row["translated_title"],
            translated_body=row["translated_body"],
            published_at=datetime.fromisoformat(row["published_at"])
            if row["published_at"]
            else None,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
