#!/usr/bin/env python3
"""Main entry point for AI NewsBot.

Runs the collect -> translate -> publish pipeline once or on a fixed interval.
Can be run manually, from cron, or as a long-lived service.

Usage:
    python main.py              # Run the pipeline once
    python main.py run --loop   # Run every RUN_INTERVAL_MINUTES
    python main.py health       # Check translation and Telegram access
    python main.py stats        # Show database statistics
    python main.py --help       # Show help
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables before importing config
load_dotenv()

from ai_newsbot.collectors import RedditCollector
from ai_newsbot.config import settings
from ai_newsbot.delivery import TelegramPublisher
from ai_newsbot.errors import StageFailure
from ai_newsbot.pipeline import NewsPipeline
from ai_newsbot.sources import load_sources, sources_from_urls
from ai_newsbot.storage import ItemDatabase
from ai_newsbot.translation import BatchTranslator, create_translation_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)


def build_pipeline(db: ItemDatabase) -> NewsPipeline:
    """Wire the configured collaborators into a pipeline."""
    sources = sources_from_urls(settings.reddit_url_list) or load_sources(settings.sources_file)
    logger.info(f"Loaded {len(sources)} sources")

    return NewsPipeline(
        collector=RedditCollector(sources),
        store=db,
        translator=BatchTranslator(create_translation_client(settings)),
        publisher=TelegramPublisher(),
    )


async def run_once(pipeline: NewsPipeline, db: ItemDatabase) -> bool:
    """Run the pipeline under the configured deadline."""
    try:
        async with asyncio.timeout(settings.run_timeout):
            stats = await pipeline.run_pipeline()
    except StageFailure as e:
        logger.error(f"Pipeline run aborted: {e}")
        return False
    except TimeoutError:
        logger.error(f"Pipeline run exceeded {settings.run_timeout:.0f}s and was cancelled")
        return False

    db.save_run_stats(stats)
    return True


async def run(loop: bool, interval_minutes: int) -> bool:
    """Run once, or forever with a pause between runs.

    Runs never overlap: the next one starts only after the previous one
    finished and the interval elapsed.
    """
    db = ItemDatabase()
    pipeline = build_pipeline(db)

    ok = await run_once(pipeline, db)
    while loop:
        logger.info(f"Next run in {interval_minutes} minutes")
        await asyncio.sleep(interval_minutes * 60)
        ok = await run_once(pipeline, db)
    return ok


async def health() -> bool:
    """Check the translation backend and the Telegram bot."""
    ok = True

    try:
        translator = BatchTranslator(create_translation_client(settings))
        await translator.health_check()
        logger.info("Translation service is healthy")
    except Exception as e:
        logger.error(f"Translation service health check failed: {e}")
        ok = False

    try:
        await TelegramPublisher().health_check()
        logger.info("Telegram bot is healthy")
    except Exception as e:
        logger.error(f"Telegram health check failed: {e}")
        ok = False

    return ok


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="AI NewsBot - translate Reddit posts and publish them to Telegram"
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=["run", "health", "stats"],
        help="Command to run (default: run the pipeline)",
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running on a fixed interval",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.run_interval_minutes,
        help="Minutes between runs with --loop",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.command == "run":
            ok = asyncio.run(run(args.loop, args.interval))

        elif args.command == "health":
            ok = asyncio.run(health())

        else:
            stats = ItemDatabase().get_stats()
            print("\nDatabase Statistics (last 30 days):")
            print(f"  Posts stored: {stats['total_items']:,}")
            print(f"  Posts published: {stats['published_items']:,}")
            print(f"  Waiting to publish: {stats['ready_items']:,}")
            print(f"  Pipeline runs: {stats['pipeline_runs']}")
            ok = True

    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
