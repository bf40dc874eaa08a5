"""Synchronize Slack custom emoji with a local on-disk archive."""

__version__ = "0.1.0"
