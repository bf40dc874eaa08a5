"""Slack web API client for the custom emoji admin endpoints.

This module provides an async HTTP client with:
- Paginated listing of custom emoji (emoji.adminList)
- Emoji image upload and alias creation (emoji.add)
- Bounded retries on rate limiting (429 + Retry-After)
- Streaming image downloads
"""

from __future__ import annotations

import asyncio
import mimetypes
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, AsyncIterator
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from slack_emoji.emoji.models import EmojiRecord
from slack_emoji.sync.logger import logger

if TYPE_CHECKING:
    from slack_emoji.config.settings import SyncSettings


LIST_ENDPOINT = "emoji.adminList"
ADD_ENDPOINT = "emoji.add"

# Rate limit handling
MAX_ATTEMPTS = 3  # Total attempts per call, including the first
DEFAULT_RETRY_AFTER = 1.0  # seconds, when Retry-After is missing or unreadable
WRITE_COOLDOWN = 1.0  # seconds, after every upload/alias attempt sequence

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class SlackClientError(Exception):
    """Base class for errors raised by SlackClient."""


class SlackTransportError(SlackClientError):
    """Raised on connectivity failures and timeouts."""


class SlackProtocolError(SlackClientError):
    """Raised when Slack answers with an error payload or status."""

    def __init__(self, error: str, status_code: int | None = None) -> None:
        self.error = error
        self.status_code = status_code
        if status_code is None:
            super().__init__(f"Slack API error: {error}")
        else:
            super().__init__(f"Slack API error {status_code}: {error}")


class SlackDecodeError(SlackClientError):
    """Raised when a response body cannot be decoded."""


class MalformedEmojiRecord(SlackDecodeError):
    """A single emoji entry in an otherwise valid page failed to decode."""

    def __init__(self, payload: Any, reason: str) -> None:
        self.payload = payload
        self.reason = reason
        name = payload.get("name") if isinstance(payload, dict) else None
        self.name = name if isinstance(name, str) else "<unknown>"
        super().__init__(f"Malformed emoji record {self.name}: {reason}")


class RateLimitExhausted(SlackClientError):
    """Raised when every attempt of a single call was rate limited."""

    def __init__(self, subject: str, attempts: int) -> None:
        self.subject = subject
        self.attempts = attempts
        super().__init__(f"Rate limited {attempts} times on {subject}")


def _parse_retry_after(value: str | None) -> float:
    """Read a Retry-After header value in whole seconds."""
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        seconds = float(value)
    except ValueError:
        return DEFAULT_RETRY_AFTER
    return seconds if seconds >= 0 else DEFAULT_RETRY_AFTER


@dataclass
class SlackClient:
    """Async client for a single Slack workspace.

    Authenticates with a user token sent as a form field and, when given,
    the browser session cookie ("d") sent as a Cookie header.
    """

    token: str
    workspace: str
    session_cookie: str = ""
    user_agent: str = "slack-emoji"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: "SyncSettings") -> "SlackClient":
        """Build a client from validated settings."""
        return cls(
            token=settings.token,
            workspace=settings.workspace,
            session_cookie=settings.session_cookie,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.workspace}.slack.com/api"

    @property
    def api_headers(self) -> dict[str, str]:
        """Headers sent to the workspace API (never to the image CDN)."""
        headers: dict[str, str] = {}
        if self.session_cookie:
            headers["Cookie"] = f"d={quote(self.session_cookie, safe='')}"
        return headers

    async def __aenter__(self) -> "SlackClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")
        return self._client

    async def _post(
        self,
        endpoint: str,
        subject: str,
        data: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """POST to an API endpoint, retrying only on rate limiting.

        Args:
            endpoint: API method name, e.g. "emoji.add"
            subject: What the call is about, used in logs and errors
            data: Form fields
            files: Multipart parts

        Returns:
            The decoded JSON payload of a successful call
        """
        client = self._require_client()

        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                response = await client.post(
                    f"/{endpoint}",
                    data=data,
                    files=files,
                    headers=self.api_headers,
                )
            except httpx.TransportError as e:
                raise SlackTransportError(f"{endpoint} failed for {subject}: {e}") from e

            if response.status_code == 429:
                retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                logger.rate_limit(subject, retry_after, attempt, MAX_ATTEMPTS)
                if attempt < MAX_ATTEMPTS:
                    await asyncio.sleep(retry_after)
                continue

            return self._decode(response)

        raise RateLimitExhausted(subject, MAX_ATTEMPTS)

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        """Decode a Slack API response, raising on error payloads."""
        try:
            payload = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                raise SlackProtocolError(
                    response.text or "unexpected status", response.status_code
                ) from e
            raise SlackDecodeError(f"Response is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise SlackDecodeError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )

        if payload.get("error") or not payload.get("ok", response.status_code < 400):
            raise SlackProtocolError(
                str(payload.get("error") or "unknown_error"), response.status_code
            )

        if response.status_code >= 400:
            raise SlackProtocolError("unexpected status", response.status_code)

        return payload

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    async def fetch_page(
        self, page: int, count: int
    ) -> tuple[list[EmojiRecord | MalformedEmojiRecord], int]:
        """Fetch one page of the workspace's custom emoji.

        Args:
            page: 1-based page number
            count: Emoji per page

        Returns:
            (entries, total_pages). An entry that fails to decode is returned
            in place as a MalformedEmojiRecord so the rest of the page survives.
        """
        payload = await self._post(
            LIST_ENDPOINT,
            subject=f"page {page}",
            data={"token": self.token, "count": str(count), "page": str(page)},
        )

        try:
            entries = payload["emoji"]
            total_pages = int(payload["paging"]["pages"])
        except (KeyError, TypeError, ValueError) as e:
            raise SlackDecodeError(f"Unexpected emoji list payload: {e!r}") from e
        if not isinstance(entries, list):
            raise SlackDecodeError("Unexpected emoji list payload: 'emoji' is not a list")

        records: list[EmojiRecord | MalformedEmojiRecord] = []
        for entry in entries:
            try:
                records.append(EmojiRecord.model_validate(entry))
            except ValidationError as e:
                records.append(MalformedEmojiRecord(entry, str(e)))

        logger.page_fetched(page, total_pages, len(records))
        return records, total_pages

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    async def upload_image(self, name: str, filename: str, content: bytes) -> None:
        """Create a new custom emoji from image bytes."""
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            await self._post(
                ADD_ENDPOINT,
                subject=name,
                data={"mode": "data", "name": name, "token": self.token},
                files={"image": (filename, content, content_type)},
            )
        finally:
            await asyncio.sleep(WRITE_COOLDOWN)

    async def create_alias(self, name: str, alias_for: str) -> None:
        """Create a custom emoji named `name` as an alias of `alias_for`."""
        fields = {
            "mode": "alias",
            "name": name,
            "alias_for": alias_for,
            "token": self.token,
        }
        try:
            # (None, value) parts keep the request multipart without a file
            await self._post(
                ADD_ENDPOINT,
                subject=name,
                files={key: (None, value) for key, value in fields.items()},
            )
        finally:
            await asyncio.sleep(WRITE_COOLDOWN)

    # -------------------------------------------------------------------------
    # Download
    # -------------------------------------------------------------------------

    async def download_bytes(self, url: str) -> AsyncIterator[bytes]:
        """Stream an image body chunk by chunk."""
        client = self._require_client()
        try:
            async with client.stream("GET", url) as response:
                if response.status_code >= 400:
                    raise SlackProtocolError(
                        f"download of {url} failed", response.status_code
                    )
                async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                    yield chunk
        except httpx.TransportError as e:
            raise SlackTransportError(f"Download of {url} failed: {e}") from e
