"""Download direction: workspace emoji -> local archive.

Every remote emoji whose name is not yet in the archive's metadata log is
downloaded and then recorded. Errors in the remote listing are logged and
skipped; a failed download or local write aborts the run, and the next run
retries the emoji because it never reached the log.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from slack_emoji.core import BaseOrchestrator
from slack_emoji.emoji.models import ArchivedEmoji, EmojiRecord
from slack_emoji.sync.client import SlackClientError
from slack_emoji.sync.logger import logger
from slack_emoji.sync.pagination import EmojiPaginator, StreamParameters

if TYPE_CHECKING:
    from slack_emoji.archive import EmojiArchive
    from slack_emoji.sync.client import SlackClient


class DownloadOrchestrator(BaseOrchestrator):
    """Mirrors the workspace's custom emoji into an archive."""

    def __init__(
        self,
        client: "SlackClient",
        archive: "EmojiArchive",
        params: StreamParameters | None = None,
    ) -> None:
        super().__init__()
        self.client = client
        self.archive = archive
        self.params = params or StreamParameters()
        # Stats
        self.downloaded = 0
        self.skipped = 0
        self.failed = 0
        self.bytes_written = 0

    async def _run_pipeline(self) -> None:
        self.archive.ensure_exists()
        known_names = self.archive.known_names()
        logger.info(f"{len(known_names):,} emoji already archived in {self.archive.path}")

        async for item in EmojiPaginator(self.client, self.params):
            if isinstance(item, SlackClientError):
                self.failed += 1
                logger.error(f"Failed to fetch emoji list or parse response: {item}")
                continue
            await self._process(item, known_names)

    async def _process(self, record: EmojiRecord, known_names: set[str]) -> None:
        """Download one emoji unless it is already archived."""
        try:
            emoji = ArchivedEmoji.from_record(record)
        except ValueError as e:
            self.failed += 1
            logger.record_failed(record.name, e)
            return

        if emoji.name in known_names:
            self.skipped += 1
            logger.emoji_skipped(emoji.name, "already archived")
            return

        size = await self.archive.write_image(
            emoji.filename, self.client.download_bytes(emoji.url)
        )
        self.archive.record_completion(emoji)
        known_names.add(emoji.name)

        self.downloaded += 1
        self.bytes_written += size
        logger.emoji_downloaded(emoji.name, emoji.filename, size)

    def _log_summary(self, elapsed: float) -> None:
        logger.summary(
            "Download",
            elapsed=elapsed,
            downloaded=self.downloaded,
            already_archived=self.skipped,
            failed=self.failed,
            bytes_written=self.bytes_written,
        )
