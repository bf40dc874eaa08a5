"""Archive directory holding emoji images and the metadata log."""

from __future__ import annotations

from contextlib import suppress
from pathlib import Path
from typing import Any, AsyncIterable, Iterator

from slack_emoji.archive.metadata_log import METADATA_FILENAME, ArchiveError, MetadataLog
from slack_emoji.emoji.models import ArchivedEmoji


class EmojiArchive:
    """A flat directory of emoji images plus its metadata log.

    The log is opened on first use and closed by close() or on leaving a
    `with` block.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._log: MetadataLog | None = None

    def __repr__(self) -> str:
        return f"EmojiArchive({str(self.path)!r})"

    def __enter__(self) -> "EmojiArchive":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._log is not None:
            self._log.close()
            self._log = None

    @property
    def metadata_path(self) -> Path:
        return self.resolve_path(METADATA_FILENAME)

    @property
    def log(self) -> MetadataLog:
        if self._log is None:
            self._log = MetadataLog(self.metadata_path).open()
        return self._log

    def exists(self) -> bool:
        return self.path.is_dir()

    def ensure_exists(self) -> None:
        """Create the directory and any missing parents."""
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArchiveError(f"Could not create archive directory {self.path}: {e}") from e

    def resolve_path(self, filename: str) -> Path:
        return self.path / filename

    def known_names(self) -> set[str]:
        return self.log.known_names()

    def record_completion(self, emoji: ArchivedEmoji) -> None:
        self.log.record(emoji)

    def stream_archived_emoji(self) -> Iterator[ArchivedEmoji]:
        return self.log.replay()

    async def write_image(self, filename: str, chunks: AsyncIterable[bytes]) -> int:
        """Stream image bytes to disk, returning the number of bytes written.

        A partially written file is removed before the error propagates.
        """
        path = self.resolve_path(filename)
        size = 0
        try:
            # Synchronous writes, one chunk per await
            with open(path, "wb") as f:
                async for chunk in chunks:
                    f.write(chunk)
                    size += len(chunk)
        except BaseException as e:
            with suppress(OSError):
                path.unlink(missing_ok=True)
            if isinstance(e, OSError):
                raise ArchiveError(f"Could not write {path}: {e}") from e
            raise
        return size
