"""Post collectors."""

from ai_newsbot.collectors.base import SourceCollector
from ai_newsbot.collectors.reddit import RedditCollector

__all__ = ["RedditCollector", "SourceCollector"]
