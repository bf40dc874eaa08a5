#!/usr/bin/env python3
"""Regenerate slack_emoji/emoji/data/standard_shortcodes.json.

Downloads the emoji-data catalogue Slack's own emoji picker is built from
and keeps the short names of every emoji added up to the newest Unicode
emoji version Slack is known to support.

Usage:
    python tools/generate_shortcodes.py
    python tools/generate_shortcodes.py --max-version 14.0 --output path.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from slack_emoji.utils.logging import setup_logging

EMOJI_DATA_URL = "https://raw.githubusercontent.com/iamcal/emoji-data/master/emoji.json"
DEFAULT_MAX_VERSION = "13.0"
DEFAULT_OUTPUT = (
    Path(__file__).resolve().parent.parent
    / "slack_emoji"
    / "emoji"
    / "data"
    / "standard_shortcodes.json"
)

logger = logging.getLogger(__name__)


def parse_version(value: str) -> tuple[int, ...]:
    """Parse "13.0" / "13" / "0.6" into a comparable tuple."""
    return tuple(int(part) for part in value.strip().split("."))


def select_short_names(emojis: list[dict[str, Any]], max_version: str) -> list[str]:
    """Short names of every emoji added in or before `max_version`."""
    limit = parse_version(max_version)
    names: set[str] = set()
    for emoji in emojis:
        added_in = emoji.get("added_in")
        if not added_in or parse_version(added_in) > limit:
            continue
        names.update(emoji.get("short_names", []))
    return sorted(names)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--url", default=EMOJI_DATA_URL)
    parser.add_argument("--max-version", default=DEFAULT_MAX_VERSION)
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT)
    args = parser.parse_args()

    setup_logging()

    response = httpx.get(args.url, timeout=10.0, follow_redirects=True)
    response.raise_for_status()
    names = select_short_names(response.json(), args.max_version)

    args.output.write_text(
        json.dumps(
            {"max_version": args.max_version, "short_names": names},
            indent=0,
            ensure_ascii=False,
        )
        + "\n",
        encoding="utf-8",
    )
    logger.info(f"Wrote {len(names):,} short names to {args.output}")


if __name__ == "__main__":
    main()
