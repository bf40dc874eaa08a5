"""Shared fixtures for slack-emoji tests."""

from __future__ import annotations

from typing import Any

import pytest

from tests.factories import make_remote_emoji


@pytest.fixture
def remote_emoji() -> dict[str, Any]:
    """A single emoji entry from the remote listing."""
    return make_remote_emoji("zuck")
