"""Upload direction: local archive -> workspace.

The remote emoji listing is indexed once up front. Archived emoji are then
streamed from the metadata log: reserved names and names already present
remotely are skipped, plain emoji are uploaded immediately and aliases are
held back until every plain emoji has been handled, giving their targets
the best chance to exist by the time the alias is created.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from slack_emoji.config.settings import ConfigurationError
from slack_emoji.core import BaseOrchestrator
from slack_emoji.emoji.collection import ExistenceKind, RemoteEmojiIndex
from slack_emoji.emoji.shortcodes import StandardShortcodeSet, load_standard_shortcodes
from slack_emoji.sync.client import SlackClientError
from slack_emoji.sync.logger import logger
from slack_emoji.sync.pagination import StreamParameters

if TYPE_CHECKING:
    from slack_emoji.archive import EmojiArchive
    from slack_emoji.emoji.models import ArchivedEmoji
    from slack_emoji.sync.client import SlackClient


class UploadOrchestrator(BaseOrchestrator):
    """Pushes archived emoji that the workspace does not have yet."""

    def __init__(
        self,
        client: "SlackClient",
        archive: "EmojiArchive",
        shortcodes: StandardShortcodeSet | None = None,
        params: StreamParameters | None = None,
    ) -> None:
        super().__init__()
        self.client = client
        self.archive = archive
        self.shortcodes = shortcodes if shortcodes is not None else load_standard_shortcodes()
        self.params = params or StreamParameters()
        self.pending_aliases: list[ArchivedEmoji] = []
        # Stats
        self.uploaded = 0
        self.aliased = 0
        self.skipped_existing = 0
        self.skipped_reserved = 0
        self.failed = 0

    async def _run_pipeline(self) -> None:
        if not self.archive.exists():
            raise ConfigurationError(f'"{self.archive.path}" is not a directory')

        index = await RemoteEmojiIndex.build(self.client, self.params)

        for emoji in self.archive.stream_archived_emoji():
            await self._process(emoji, index)

        await self._create_pending_aliases()

    async def _process(self, emoji: "ArchivedEmoji", index: RemoteEmojiIndex) -> None:
        """Decide what to do with one archived emoji."""
        logger.debug(f"Attempting to upload emoji {emoji.name}")

        if emoji.name in self.shortcodes:
            self.skipped_reserved += 1
            logger.reserved_name(emoji.name)
            return

        existence = index.existence_of(emoji.name)
        if existence.kind is ExistenceKind.EXISTS:
            self.skipped_existing += 1
            logger.emoji_skipped(emoji.name, "exists on remote")
            return
        if existence.kind is ExistenceKind.EXISTS_AS_ALIAS:
            self.skipped_existing += 1
            logger.emoji_skipped(
                emoji.name, f"exists on remote as an alias for {existence.alias_for}"
            )
            return

        if emoji.is_alias:
            self.pending_aliases.append(emoji)
            return

        await self._upload(emoji)

    async def _upload(self, emoji: "ArchivedEmoji") -> None:
        path = self.archive.resolve_path(emoji.filename)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.failed += 1
            logger.record_failed(emoji.name, e)
            return

        try:
            await self.client.upload_image(emoji.name, emoji.filename, content)
        except SlackClientError as e:
            self.failed += 1
            logger.record_failed(emoji.name, e)
            return

        self.uploaded += 1
        logger.emoji_uploaded(emoji.name)

    async def _create_pending_aliases(self) -> None:
        """Create every deferred alias, in archive order.

        Targets are not re-checked; a failed alias is logged and the rest
        still run.
        """
        pending_names = {alias.name for alias in self.pending_aliases}

        for alias in self.pending_aliases:
            if alias.alias_for in pending_names:
                # Alias chains are not resolved; Slack decides.
                logger.debug(f"{alias.name} targets another alias ({alias.alias_for})")
            try:
                await self.client.create_alias(alias.name, alias.alias_for)
            except SlackClientError as e:
                self.failed += 1
                logger.record_failed(alias.name, e)
                continue

            self.aliased += 1
            logger.alias_created(alias.name, alias.alias_for)

        self.pending_aliases.clear()

    def _log_summary(self, elapsed: float) -> None:
        logger.summary(
            "Upload",
            elapsed=elapsed,
            uploaded=self.uploaded,
            aliases_created=self.aliased,
            already_on_remote=self.skipped_existing,
            reserved_names=self.skipped_reserved,
            failed=self.failed,
        )
