"""Standard emoji shortcodes reserved by Slack.

Slack refuses to create a custom emoji whose name matches a shortcode of a
built-in (Unicode) emoji, but its lookup endpoints report such names as
missing. The names are loaded once from a packaged resource generated by
tools/generate_shortcodes.py.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Iterable, Iterator

RESOURCE_PACKAGE = "slack_emoji.emoji"
RESOURCE_NAME = "data/standard_shortcodes.json"


class StandardShortcodeSet:
    """Read-only set of reserved shortcode names."""

    __slots__ = ("_names", "max_version")

    def __init__(self, names: Iterable[str], max_version: str = "") -> None:
        self._names = frozenset(names)
        self.max_version = max_version

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"StandardShortcodeSet({len(self)} names, max_version={self.max_version!r})"

    @classmethod
    def from_json(cls, text: str) -> "StandardShortcodeSet":
        data = json.loads(text)
        return cls(data["short_names"], data.get("max_version", ""))


@lru_cache(maxsize=1)
def load_standard_shortcodes() -> StandardShortcodeSet:
    """Load the packaged shortcode set (cached)."""
    text = (
        resources.files(RESOURCE_PACKAGE)
        .joinpath(RESOURCE_NAME)
        .read_text(encoding="utf-8")
    )
    return StandardShortcodeSet.from_json(text)
