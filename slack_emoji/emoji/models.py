"""Emoji record models shared by the remote client and the local archive."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from slack_emoji.utils.time import format_created, parse_created


class EmojiRecord(BaseModel):
    """One custom emoji as reported by the workspace.

    `created` accepts epoch seconds (remote listing) or ISO-8601 (archive)
    and is always serialized as ISO-8601.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    url: str
    added_by: str = Field(
        default="",
        validation_alias=AliasChoices("added_by", "user_display_name"),
    )
    alias_for: str = ""
    created: datetime

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("alias_for", mode="before")
    @classmethod
    def none_alias_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("created", mode="before")
    @classmethod
    def coerce_created(cls, v: Any) -> datetime:
        return parse_created(v)

    @field_serializer("created")
    def serialize_created(self, value: datetime) -> str:
        return format_created(value)

    @property
    def is_alias(self) -> bool:
        return bool(self.alias_for)


class ArchivedEmoji(EmojiRecord):
    """An emoji record plus the name of its image file in the archive."""

    filename: str

    @staticmethod
    def filename_from_url(url: str) -> str:
        """Derive a collision-free filename from an emoji image URL.

        The last two path segments are joined with a hyphen:
        ``https://emoji.slack-edge.com/T03C6/zuck/6f285f21ac5f972b.png``
        becomes ``zuck-6f285f21ac5f972b.png``.
        """
        parts = url.rsplit("/", 2)
        if len(parts) < 3 or not parts[1] or not parts[2]:
            raise ValueError(f"Cannot derive a filename from URL: {url!r}")
        return f"{parts[1]}-{parts[2]}"

    @classmethod
    def from_record(cls, record: EmojiRecord) -> "ArchivedEmoji":
        """Attach the derived filename to a remote record."""
        return cls(
            name=record.name,
            url=record.url,
            added_by=record.added_by,
            alias_for=record.alias_for,
            created=record.created,
            filename=cls.filename_from_url(record.url),
        )
