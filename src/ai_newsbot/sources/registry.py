"""Source registry for loading subreddit feeds."""

import logging
from pathlib import Path

import yaml

from ai_newsbot.models import SourceConfig

logger = logging.getLogger(__name__)

DEFAULT_FEEDS_PATH = Path(__file__).parent / "feeds.yaml"


def load_sources(feeds_path: Path | None = None) -> list[SourceConfig]:
    """Load enabled source configurations from a YAML file."""
    if feeds_path is None:
        feeds_path = DEFAULT_FEEDS_PATH

    with open(feeds_path) as f:
        data = yaml.safe_load(f) or {}

    sources = []
    for source_data in data.get("sources", []):
        try:
            source = SourceConfig(
                name=source_data["name"],
                url=source_data["url"],
                enabled=source_data.get("enabled", True),
            )
            if source.enabled:
                sources.append(source)
        except (KeyError, TypeError, ValueError) as e:
            # Log error but continue loading other sources
            name = source_data.get("name", "unknown") if isinstance(source_data, dict) else "unknown"
            logger.warning(f"Failed to load source {name}: {e}")

    return sources


def sources_from_urls(urls: list[str]) -> list[SourceConfig]:
    """Build sources from bare feed URLs (the REDDIT_URLS override)."""
    return [SourceConfig(name=url, url=url) for url in urls]
