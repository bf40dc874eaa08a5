"""Main orchestration for the emoji sync.

Builds the Slack client and the local archive from settings and runs the
orchestrator for the requested direction.
"""

from __future__ import annotations

from enum import Enum

from slack_emoji.archive import EmojiArchive
from slack_emoji.config.settings import SyncSettings
from slack_emoji.core import BaseOrchestrator
from slack_emoji.emoji.shortcodes import load_standard_shortcodes
from slack_emoji.sync.client import SlackClient
from slack_emoji.sync.download import DownloadOrchestrator
from slack_emoji.sync.logger import logger
from slack_emoji.sync.pagination import StreamParameters
from slack_emoji.sync.upload import UploadOrchestrator


class SyncDirection(str, Enum):
    DOWNLOAD = "download"
    UPLOAD = "upload"


def build_orchestrator(
    settings: SyncSettings,
    direction: SyncDirection,
    client: SlackClient,
    archive: EmojiArchive,
) -> BaseOrchestrator:
    """Pick and configure the orchestrator for a direction."""
    if direction is SyncDirection.DOWNLOAD:
        return DownloadOrchestrator(client, archive, settings.stream_parameters())

    # The remote index must cover the whole workspace, so only the page
    # size carries over from the pagination settings.
    return UploadOrchestrator(
        client,
        archive,
        load_standard_shortcodes(),
        StreamParameters(page_size=settings.page_size),
    )


async def run_sync(settings: SyncSettings, direction: SyncDirection | str) -> BaseOrchestrator:
    """Entry point for running one sync.

    Returns:
        The orchestrator, with its counters filled in
    """
    direction = SyncDirection(direction)

    with logger.block(f"{direction.value.capitalize()} emoji") as block:
        block.field("workspace", settings.workspace, color="cyan")
        block.field("directory", settings.target_directory)

        with EmojiArchive(settings.target_directory) as archive:
            async with SlackClient.from_settings(settings) as client:
                orchestrator = build_orchestrator(settings, direction, client, archive)
                await orchestrator.run()

        block.result(f"{direction.value} finished in {orchestrator.elapsed:.1f}s")

    return orchestrator
