"""Lazy pagination over the workspace's custom emoji listing.

Pages are fetched one at a time, only when the consumer asks for the next
record. Failures are yielded as values instead of raised, so a single bad
entry does not end the stream:

- MalformedEmojiRecord: yielded in place, the stream continues
- any other SlackClientError: yielded, then the stream ends
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, TypeAlias

from slack_emoji.emoji.models import EmojiRecord
from slack_emoji.sync.client import SlackClientError

if TYPE_CHECKING:
    from slack_emoji.sync.client import SlackClient


DEFAULT_STARTING_PAGE = 1
DEFAULT_PAGE_SIZE = 100

EmojiStreamItem: TypeAlias = EmojiRecord | SlackClientError


@dataclass(frozen=True)
class StreamParameters:
    """Pagination tuning for the remote emoji stream."""

    starting_page: int = DEFAULT_STARTING_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    limit_num_pages: int | None = None

    def __post_init__(self) -> None:
        if self.starting_page < 1:
            raise ValueError("starting_page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if self.limit_num_pages is not None and self.limit_num_pages < 1:
            raise ValueError("limit_num_pages must be >= 1")


class EmojiPaginator:
    """Streams every emoji across all pages as one sequence.

    The total page count is latched from the first response. Iteration stops
    when the next page exceeds that total or when `limit_num_pages` pages
    have been fetched, whichever comes first.
    """

    def __init__(
        self, client: "SlackClient", params: StreamParameters | None = None
    ) -> None:
        self.client = client
        self.params = params or StreamParameters()
        self.pages_fetched = 0
        self.total_pages: int | None = None

    def __aiter__(self) -> AsyncIterator[EmojiStreamItem]:
        return self.stream()

    async def stream(self) -> AsyncIterator[EmojiStreamItem]:
        """Yield records (or error values) page by page."""
        page = self.params.starting_page
        limit = self.params.limit_num_pages

        while True:
            if self.total_pages is not None and page > self.total_pages:
                break
            if limit is not None and self.pages_fetched >= limit:
                break

            try:
                records, total_pages = await self.client.fetch_page(
                    page, self.params.page_size
                )
            except SlackClientError as e:
                yield e
                return

            self.pages_fetched += 1
            if self.total_pages is None:
                self.total_pages = total_pages
                if page > total_pages:
                    break

            for record in records:
                yield record

            page += 1
