"""Rich-based logging utilities for the emoji sync engine.

Provides console output for download and upload runs, with color-coded
messages for skips, failures and rate limiting.
"""

from __future__ import annotations

from typing import Any

from slack_emoji.utils.pipeline_logger import BasePipelineLogger


class SyncLogger(BasePipelineLogger):
    """Logger for emoji sync operations with rich output.

    Extends BasePipelineLogger with sync-specific methods for remote
    paging, per-emoji outcomes and run summaries.
    """

    def __init__(self) -> None:
        super().__init__(__name__)

    # -------------------------------------------------------------------------
    # Sync-specific: Rate Limiting
    # -------------------------------------------------------------------------

    def rate_limit(
        self, subject: str, retry_after: float, attempt: int, max_attempts: int
    ) -> None:
        """Log a rate limit warning with retry time."""
        if attempt < max_attempts:
            self._logger.warning(
                f"Rate limited on {subject} (attempt {attempt}/{max_attempts}). "
                f"Waiting {retry_after:.1f}s..."
            )
        else:
            self._logger.warning(
                f"Rate limited on {subject} (attempt {attempt}/{max_attempts}). Giving up"
            )

    # -------------------------------------------------------------------------
    # Sync-specific: Remote Paging
    # -------------------------------------------------------------------------

    def page_fetched(self, page: int, total_pages: int, count: int) -> None:
        """Log a fetched page of the remote emoji listing."""
        self._logger.debug(f"Fetched page {page}/{total_pages} ({count} emoji)")

    # -------------------------------------------------------------------------
    # Sync-specific: Per-Emoji Outcomes
    # -------------------------------------------------------------------------

    def emoji_downloaded(self, name: str, filename: str, size: int) -> None:
        """Log a downloaded emoji."""
        self._logger.info(f"Downloaded emoji {name} -> {filename} ({size:,} bytes)")

    def emoji_uploaded(self, name: str) -> None:
        """Log an uploaded emoji."""
        self._logger.info(f"Uploaded emoji {name}")

    def alias_created(self, name: str, alias_for: str) -> None:
        """Log a created alias."""
        self._logger.info(f"Created alias {name} -> {alias_for}")

    def emoji_skipped(self, name: str, reason: str) -> None:
        """Log a skipped emoji."""
        self._logger.debug(f"Skipping {name}: {reason}")

    def reserved_name(self, name: str) -> None:
        """Log an emoji whose name collides with a standard shortcode."""
        self._logger.warning(
            f"Cannot upload {name}: name conflicts with a standard emoji shortcode"
        )

    def record_failed(self, name: str, error: Exception) -> None:
        """Log a per-emoji failure that is skipped."""
        self._logger.error(f"{name}: {error}; skipping")

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def summary(
        self,
        direction: str = "Sync",
        elapsed: float = 0.0,
        **stats: Any,
    ) -> None:
        """Print final sync summary.

        Keyword stats are rendered as rows, e.g. ``uploaded=3`` -> "Uploaded: 3".
        """
        self.print_summary(
            direction,
            elapsed=elapsed,
            stats={
                key.replace("_", " ").capitalize(): value
                for key, value in stats.items()
            },
            style="cyan",
        )


# Global logger instance
logger = SyncLogger()
