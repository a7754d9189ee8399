"""Pipeline orchestrator: collect, translate, persist, publish."""

import logging
import time

from ai_newsbot.collectors.base import SourceCollector
from ai_newsbot.delivery.base import Publisher
from ai_newsbot.errors import ItemSkipped, StageFailure
from ai_newsbot.models import Item, PipelineStats
from ai_newsbot.storage.base import ItemStore
from ai_newsbot.translation.base import BatchTranslator

logger = logging.getLogger(__name__)


class NewsPipeline:
    """Orchestrates one end-to-end run of the newsbot.

    Items are handled one at a time. A failure on a single item is logged and
    the item is left for the next run; only the collect and ready-listing
    stages can fail a run. Run deadlines and cancellation belong to the
    caller: wrap ``run_pipeline`` in ``asyncio.timeout`` or cancel its task.
    """

    def __init__(
        self,
        collector: SourceCollector,
        store: ItemStore,
        translator: BatchTranslator,
        publisher: Publisher,
    ):
        self.collector = collector
        self.store = store
        self.translator = translator
        self.publisher = publisher

    async def run_pipeline(self) -> PipelineStats:
        """Run collect, ingest and publish stages.

        Returns:
            Statistics for the run

        Raises:
            StageFailure: collecting or listing ready items failed
        """
        stats = PipelineStats()
        start_time = time.monotonic()
        logger.info("Starting newsbot pipeline run")

        items = await self.collect(stats)
        await self.ingest(items, stats)
        await self.publish_ready(stats)

        stats.duration_seconds = time.monotonic() - start_time
        logger.info(
            f"Pipeline complete in {stats.duration_seconds:.1f}s: "
            f"{stats.items_collected} collected, {stats.items_ingested} new, "
            f"{stats.items_skipped} skipped, {stats.items_published} published"
        )
        return stats

    async def collect(self, stats: PipelineStats) -> list[Item]:
        """Stage 1: fetch candidate items."""
        logger.info("Collecting posts...")
        try:
            items = await self.collector.fetch()
        except Exception as e:
            logger.error(f"Collection failed: {e}")
            raise StageFailure("collect", e) from e

        stats.items_collected = len(items)
        logger.info(f"Collected {len(items)} posts")
        return items

    async def ingest(self, items: list[Item], stats: PipelineStats) -> int:
        """Stage 2: translate and persist every item not seen before.

        Returns:
            Number of items newly persisted
        """
        for item in items:
            try:
                if await self._ingest_item(item):
                    stats.items_ingested += 1
                else:
                    stats.items_already_seen += 1
            except ItemSkipped as e:
                logger.warning(str(e))
                stats.items_skipped += 1
                stats.errors.append(str(e))

        logger.info(
            f"Ingested {stats.items_ingested} new posts "
            f"({stats.items_already_seen} already seen, {stats.items_skipped} skipped)"
        )
        return stats.items_ingested

    async def _ingest_item(self, item: Item) -> bool:
        """Translate then persist one item.

        Returns:
            True if the item was new and is now stored, False if already seen

        Raises:
            ItemSkipped: any step failed; nothing was persisted
        """
        try:
            seen = await self.store.exists(item.source_id)
        except Exception as e:
            raise ItemSkipped(item.source_id, "exists", e) from e
        if seen:
            return False

        logger.info(f"Translating post {item.source_id}: {item.title[:60]}")
        try:
            translated_title, translated_body = await self.translator.translate_post(
                item.title, item.body
            )
        except Exception as e:
            raise ItemSkipped(item.source_id, "translate", e) from e

        try:
            await self.store.upsert(item.with_translation(translated_body, translated_title))
        except Exception as e:
            raise ItemSkipped(item.source_id, "upsert", e) from e
        return True

    async def publish_ready(self, stats: PipelineStats) -> int:
        """Stage 3: deliver every ready item, oldest first.

        Returns:
            Number of items delivered and marked published
        """
        logger.info("Publishing ready posts...")
        try:
            ready = await self.store.list_ready()
        except Exception as e:
            logger.error(f"Listing ready posts failed: {e}")
            raise StageFailure("list_ready", e) from e

        stats.items_ready = len(ready)
        for item in ready:
            try:
                await self.publisher.deliver(item)
            except Exception as e:
                logger.warning(f"Failed to deliver post {item.source_id}: {e}")
                stats.publish_failures += 1
                stats.errors.append(f"deliver {item.source_id}: {e}")
                continue

            try:
                await self.store.mark_published(item.source_id)
            except Exception as e:
                # Delivered but still listed as ready: it will be sent again next run
                logger.error(f"Delivered post {item.source_id} but failed to mark it published: {e}")
                stats.errors.append(f"mark_published {item.source_id}: {e}")
                continue

            stats.items_published += 1
            logger.info(f"Published post {item.source_id}: {item.title[:60]}")

        logger.info(f"Published {stats.items_published}/{stats.items_ready} ready posts")
        return stats.items_published
