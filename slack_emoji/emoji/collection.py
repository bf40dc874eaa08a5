"""In-memory index of the emoji that exist on the remote workspace."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, AsyncIterable

from slack_emoji.emoji.models import EmojiRecord
from slack_emoji.sync.client import MalformedEmojiRecord, SlackClientError
from slack_emoji.sync.logger import logger
from slack_emoji.sync.pagination import EmojiPaginator, StreamParameters

if TYPE_CHECKING:
    from slack_emoji.sync.client import SlackClient
    from slack_emoji.sync.pagination import EmojiStreamItem


class ExistenceKind(str, Enum):
    EXISTS = "exists"
    EXISTS_AS_ALIAS = "exists_as_alias"
    DOES_NOT_EXIST = "does_not_exist"


@dataclass(frozen=True)
class EmojiExistence:
    """Result of looking a name up in the remote index."""

    kind: ExistenceKind
    alias_for: str = ""

    @classmethod
    def exists(cls) -> "EmojiExistence":
        return cls(ExistenceKind.EXISTS)

    @classmethod
    def exists_as_alias_for(cls, target: str) -> "EmojiExistence":
        return cls(ExistenceKind.EXISTS_AS_ALIAS, target)

    @classmethod
    def does_not_exist(cls) -> "EmojiExistence":
        return cls(ExistenceKind.DOES_NOT_EXIST)

    @property
    def is_present(self) -> bool:
        return self.kind is not ExistenceKind.DOES_NOT_EXIST


class RemoteEmojiIndex:
    """Remote emoji keyed by name, built once per run."""

    def __init__(self) -> None:
        self._emoji: dict[str, EmojiRecord] = {}

    def __len__(self) -> int:
        return len(self._emoji)

    def __contains__(self, name: object) -> bool:
        return name in self._emoji

    def insert(self, record: EmojiRecord) -> EmojiRecord | None:
        """Add a record, returning the one it replaced (if any)."""
        previous = self._emoji.get(record.name)
        self._emoji[record.name] = record
        return previous

    def existence_of(self, name: str) -> EmojiExistence:
        record = self._emoji.get(name)
        if record is None:
            return EmojiExistence.does_not_exist()
        if record.is_alias:
            return EmojiExistence.exists_as_alias_for(record.alias_for)
        return EmojiExistence.exists()

    @classmethod
    async def from_stream(
        cls, stream: AsyncIterable["EmojiStreamItem"]
    ) -> "RemoteEmojiIndex":
        """Consume a full emoji stream into an index.

        A malformed entry is logged and left out. Any other error means the
        listing is incomplete and is raised, since skip decisions made
        against a partial index would be wrong.
        """
        index = cls()
        async for item in stream:
            if isinstance(item, MalformedEmojiRecord):
                logger.warning(f"Ignoring malformed remote emoji: {item}")
                continue
            if isinstance(item, SlackClientError):
                raise item
            index.insert(item)
        return index

    @classmethod
    async def build(
        cls, client: "SlackClient", params: StreamParameters | None = None
    ) -> "RemoteEmojiIndex":
        """Enumerate every remote emoji into an index."""
        index = await cls.from_stream(EmojiPaginator(client, params))
        logger.info(f"Found {len(index):,} emoji on remote")
        return index
