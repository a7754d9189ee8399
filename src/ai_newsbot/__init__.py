"""AI NewsBot - translate Reddit posts and republish them to Telegram."""

__version__ = "0.1.0"
