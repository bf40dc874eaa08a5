"""CLI entry point for slack_emoji.sync.

Usage:
    python -m slack_emoji.sync myorg ./emoji download
    python -m slack_emoji.sync myorg ./emoji download --limit-num-pages 2
    python -m slack_emoji.sync myorg ./emoji upload
    python -m slack_emoji.sync myorg ./emoji upload --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from slack_emoji import __version__
from slack_emoji.config.settings import ConfigurationError, SyncSettings
from slack_emoji.sync.logger import logger
from slack_emoji.sync.run import SyncDirection, run_sync
from slack_emoji.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slack-emoji",
        description="Download emoji from or upload emoji to a Slack workspace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials:
  The token (SLACK_TOKEN) and session cookie (SLACK_SESSION_COOKIE) can be
  copied from a browser's dev tools on the workspace's customize/emoji
  page. Prefer the environment variables over the command-line flags.

Examples:
  python -m slack_emoji.sync myorg ./emoji download
      Download every custom emoji of myorg.slack.com into ./emoji

  python -m slack_emoji.sync myorg ./emoji upload
      Upload the emoji archived in ./emoji to myorg.slack.com
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "workspace",
        help='Slack workspace subdomain (for myorg.slack.com, enter "myorg")',
    )
    parser.add_argument(
        "target_directory",
        help="Directory to download emoji to or upload emoji from",
    )
    parser.add_argument(
        "-t",
        "--token",
        help="Slack token with access to the admin emoji endpoints (env: SLACK_TOKEN)",
    )
    parser.add_argument(
        "-d",
        "--session-cookie",
        help="Slack 'd' session cookie (env: SLACK_SESSION_COOKIE)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Optional JSON config file with the same keys as the SLACK_* variables",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with third-party library logs",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Optional file to write logs to",
    )

    subparsers = parser.add_subparsers(dest="direction", required=True)

    download = subparsers.add_parser(
        SyncDirection.DOWNLOAD.value,
        help="Download emoji from the workspace to the target directory",
    )
    download.add_argument("--starting-page", type=int, help="First page to fetch (default: 1)")
    download.add_argument("--page-size", type=int, help="Emoji per page (default: 100)")
    download.add_argument("--limit-num-pages", type=int, help="Stop after this many pages")

    upload = subparsers.add_parser(
        SyncDirection.UPLOAD.value,
        help="Upload emoji from the target directory to the workspace",
    )
    upload.add_argument("--page-size", type=int, help="Emoji per page when listing the workspace")

    return parser


def load_settings(args: argparse.Namespace) -> SyncSettings:
    """Merge CLI arguments over the config file and environment."""
    overrides = {
        "workspace": args.workspace,
        "target_directory": args.target_directory,
        "token": args.token,
        "session_cookie": args.session_cookie,
        "starting_page": getattr(args, "starting_page", None),
        "page_size": getattr(args, "page_size", None),
        "limit_num_pages": getattr(args, "limit_num_pages", None),
    }
    if args.config:
        return SyncSettings.from_json(args.config, **overrides)
    return SyncSettings(**{k: v for k, v in overrides.items() if v is not None})


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    if args.debug:
        log_level = logging.DEBUG
        debug_third_party = True
    elif args.verbose:
        log_level = logging.DEBUG
        debug_third_party = False
    else:
        log_level = logging.INFO
        debug_third_party = False

    setup_logging(
        level=log_level,
        log_file=args.log_file,
        debug_third_party=debug_third_party,
    )

    try:
        settings = load_settings(args)
    except ValidationError as e:
        logger.error(f"Invalid configuration:\n{e}")
        sys.exit(2)

    try:
        asyncio.run(run_sync(settings, SyncDirection(args.direction)))
        logger.success("Sync complete!")
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise


if __name__ == "__main__":
    main()
