"""Subreddit feed configuration and registry."""

from ai_newsbot.sources.registry import load_sources, sources_from_urls

__all__ = ["load_sources", "sources_from_urls"]
