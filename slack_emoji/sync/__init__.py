"""Slack emoji sync engine.

This package moves custom emoji between a Slack workspace and a local
archive directory.

Usage:
    python -m slack_emoji.sync myorg ./emoji download   # Workspace -> archive
    python -m slack_emoji.sync myorg ./emoji upload     # Archive -> workspace
"""
