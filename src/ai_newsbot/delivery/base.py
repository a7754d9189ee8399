"""Publisher interface."""

from typing import Protocol

from ai_newsbot.models import Item


class Publisher(Protocol):
    """Delivers one ready item to the destination.

    Delivery is all or nothing: ``deliver`` either returns after the
    destination accepted the whole message or raises.
    """

    async def deliver(self, item: Item) -> None:
        ...
