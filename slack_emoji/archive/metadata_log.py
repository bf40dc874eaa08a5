"""Append-only NDJSON log of every emoji materialized in an archive.

Each line is one ArchivedEmoji. Lines are only ever appended, and only
after the image they describe has been written in full, so replaying the
log is the authoritative answer to "what is already archived".
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Iterator

from pydantic import ValidationError

from slack_emoji.emoji.models import ArchivedEmoji
from slack_emoji.sync.logger import logger


METADATA_FILENAME = "metadata.ndjson"


class ArchiveError(Exception):
    """Raised when the local archive cannot be read or written."""


class MetadataLog:
    """Handle on an archive's metadata log.

    Usage:
        with MetadataLog(path) as log:
            names = log.known_names()
            log.record(archived_emoji)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._handle: IO[str] | None = None

    def __enter__(self) -> "MetadataLog":
        return self.open()

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> "MetadataLog":
        """Open (creating if absent) the log for appending."""
        if self._handle is not None:
            return self
        try:
            self._terminate_partial_line()
            self._handle = open(self.path, "a+", encoding="utf-8")
        except OSError as e:
            raise ArchiveError(f"Could not open metadata log {self.path}: {e}") from e
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _terminate_partial_line(self) -> None:
        """Finish a final line left unterminated by an interrupted write."""
        if not self.path.exists() or self.path.stat().st_size == 0:
            return
        with open(self.path, "rb+") as f:
            f.seek(-1, 2)
            if f.read(1) != b"\n":
                f.write(b"\n")

    def replay(self) -> Iterator[ArchivedEmoji]:
        """Yield every recorded emoji in append order.

        Undecodable lines (e.g. a truncated entry after a crash) are
        logged and skipped.
        """
        if not self.path.exists():
            return
        try:
            # Bytes, so a line that is not valid UTF-8 fails validation like any other
            with open(self.path, "rb") as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        yield ArchivedEmoji.model_validate_json(line)
                    except ValidationError as e:
                        logger.warning(
                            f"{self.path.name}:{lineno}: skipping unreadable entry "
                            f"({e.error_count()} errors)"
                        )
        except OSError as e:
            raise ArchiveError(f"Could not read metadata log {self.path}: {e}") from e

    def known_names(self) -> set[str]:
        """Replay the whole log and return every recorded name."""
        return {emoji.name for emoji in self.replay()}

    def record(self, emoji: ArchivedEmoji) -> None:
        """Append one entry and flush it before returning."""
        if self._handle is None:
            raise RuntimeError("Metadata log not open. Use with or open().")
        try:
            self._handle.write(emoji.model_dump_json() + "\n")
            self._handle.flush()
        except OSError as e:
            raise ArchiveError(
                f"Could not record {emoji.name} in {self.path}: {e}"
            ) from e
