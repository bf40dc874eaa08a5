"""Unit tests for slack_emoji.config.settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from slack_emoji.config.settings import SyncSettings
from slack_emoji.sync.pagination import StreamParameters


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "SLACK_WORKSPACE",
        "SLACK_TOKEN",
        "SLACK_SESSION_COOKIE",
        "SLACK_TARGET_DIRECTORY",
        "SLACK_PAGE_SIZE",
        "SLACK_STARTING_PAGE",
        "SLACK_LIMIT_NUM_PAGES",
    ):
        monkeypatch.delenv(var, raising=False)


def _settings(**kwargs) -> SyncSettings:
    values = {"workspace": "myorg", "token": "xoxs-1", "target_directory": "emoji"}
    values.update(kwargs)
    return SyncSettings(_env_file=None, **values)


class TestSyncSettings:
    def test_defaults(self) -> None:
        settings = _settings()

        assert settings.session_cookie == ""
        assert settings.starting_page == 1
        assert settings.page_size == 100
        assert settings.limit_num_pages is None
        assert settings.target_directory == Path("emoji")
        assert settings.user_agent.startswith("slack-emoji/")

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("SLACK_WORKSPACE", "envorg")
        monkeypatch.setenv("SLACK_TOKEN", "xoxs-env")
        monkeypatch.setenv("SLACK_SESSION_COOKIE", "xoxd-abc")
        monkeypatch.setenv("SLACK_TARGET_DIRECTORY", "/tmp/emoji")
        monkeypatch.setenv("SLACK_PAGE_SIZE", "250")

        settings = SyncSettings(_env_file=None)

        assert settings.workspace == "envorg"
        assert settings.token == "xoxs-env"
        assert settings.session_cookie == "xoxd-abc"
        assert settings.target_directory == Path("/tmp/emoji")
        assert settings.page_size == 250

    def test_arguments_win_over_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("SLACK_TOKEN", "xoxs-env")

        assert _settings(token="xoxs-arg").token == "xoxs-arg"

    @pytest.mark.parametrize(
        "raw",
        ["myorg", "myorg.slack.com", "https://myorg.slack.com", "https://myorg.slack.com/"],
    )
    def test_workspace_normalized(self, raw: str) -> None:
        settings = _settings(workspace=raw)

        assert settings.workspace == "myorg"
        assert settings.base_url == "https://myorg.slack.com/api"

    def test_empty_workspace_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _settings(workspace="  ")

    def test_blank_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _settings(token="   ")

    def test_token_stripped(self) -> None:
        assert _settings(token=" xoxs-1\n").token == "xoxs-1"

    def test_missing_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SyncSettings(_env_file=None, workspace="myorg", target_directory="emoji")

    @pytest.mark.parametrize(
        "field,value",
        [("starting_page", 0), ("page_size", 0), ("page_size", 5000), ("limit_num_pages", 0)],
    )
    def test_pagination_bounds(self, field: str, value: int) -> None:
        with pytest.raises(ValidationError):
            _settings(**{field: value})

    def test_stream_parameters(self) -> None:
        settings = _settings(starting_page=3, page_size=20, limit_num_pages=2)

        assert settings.stream_parameters() == StreamParameters(
            starting_page=3, page_size=20, limit_num_pages=2
        )


class TestFromJson:
    def test_loads_file(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {"workspace": "fileorg", "token": "xoxs-file", "target_directory": "out"}
            )
        )

        settings = SyncSettings.from_json(path)

        assert settings.workspace == "fileorg"
        assert settings.target_directory == Path("out")

    def test_overrides_win_and_none_ignored(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "workspace": "fileorg",
                    "token": "xoxs-file",
                    "target_directory": "out",
                    "page_size": 10,
                }
            )
        )

        settings = SyncSettings.from_json(path, workspace="cliorg", page_size=None)

        assert settings.workspace == "cliorg"
        assert settings.page_size == 10

    def test_missing_file_uses_overrides(self, tmp_path) -> None:
        settings = SyncSettings.from_json(
            tmp_path / "absent.json",
            workspace="myorg",
            token="xoxs-1",
            target_directory="emoji",
        )

        assert settings.workspace == "myorg"
