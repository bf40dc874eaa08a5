from slack_emoji.config.settings import ConfigurationError, SyncSettings

__all__ = ["ConfigurationError", "SyncSettings"]
