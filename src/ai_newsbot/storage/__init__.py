"""Persistent storage for posts."""

from ai_newsbot.storage.base import ItemStore
from ai_newsbot.storage.database import ItemDatabase

__all__ = ["ItemDatabase", "ItemStore"]
