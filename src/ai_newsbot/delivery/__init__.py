"""Delivery of translated posts."""

from ai_newsbot.delivery.base import Publisher
from ai_newsbot.delivery.telegram import TelegramPublisher

__all__ = ["Publisher", "TelegramPublisher"]
