"""Item store interface."""

from typing import Protocol

from ai_newsbot.models import Item


class ItemStore(Protocol):
    """Durable keyed storage for items and their lifecycle flags.

    Every operation is atomic on its own; callers never rely on a
    transaction spanning two calls.
    """

    async def exists(self, source_id: str) -> bool:
        """Whether an item with this id was ever persisted."""
        ...

    async def upsert(self, item: Item) -> None:
        """Insert or update an item, keeping its original created_at."""
        ...

    async def list_ready(self) -> list[Item]:
        """Translated, unpublished items, oldest created_at first."""
        ...

    async def mark_published(self, source_id: str) -> None:
        """Record a confirmed delivery."""
        ...
