"""Local emoji archive: image files plus an append-only metadata log."""

from slack_emoji.archive.directory import EmojiArchive
from slack_emoji.archive.metadata_log import (
    METADATA_FILENAME,
    ArchiveError,
    MetadataLog,
)

__all__ = [
    "ArchiveError",
    "EmojiArchive",
    "METADATA_FILENAME",
    "MetadataLog",
]
