"""Collector interface."""

from typing import Protocol

from ai_newsbot.models import Item


class SourceCollector(Protocol):
    """Anything that can produce the candidate items for one run."""

    async def fetch(self) -> list[Item]:
        """Collect the complete set of candidate items.

        Returns:
            Items in source order

        Raises:
            Exception: if any part of the collection fails; there are no
                partial results
        """
        ...
