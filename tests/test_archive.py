"""Tests for slack_emoji.archive (directory and metadata log)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from slack_emoji.archive import METADATA_FILENAME, ArchiveError, EmojiArchive, MetadataLog
from slack_emoji.sync.client import SlackTransportError
from tests.factories import make_archived


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _failing_chunks():
    yield b"partial"
    raise SlackTransportError("stream dropped")


# ---------------------------------------------------------------------------
# TestMetadataLog
# ---------------------------------------------------------------------------


class TestMetadataLog:
    """Tests for MetadataLog."""

    def test_open_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME

        with MetadataLog(path):
            pass

        assert path.exists()
        assert path.read_text() == ""

    def test_record_appends_one_line(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME

        with MetadataLog(path) as log:
            log.record(make_archived("a"))
            log.record(make_archived("b"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["name"] for line in lines] == ["a", "b"]

    def test_record_is_flushed_before_return(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME

        with MetadataLog(path) as log:
            log.record(make_archived("a"))
            # Read through a separate handle while the log is still open
            assert json.loads(path.read_text())["name"] == "a"

    def test_record_requires_open(self, tmp_path: Path) -> None:
        log = MetadataLog(tmp_path / METADATA_FILENAME)

        with pytest.raises(RuntimeError, match="not open"):
            log.record(make_archived("a"))

    def test_known_names_replays_every_entry(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        with MetadataLog(path) as log:
            log.record(make_archived("a"))
            log.record(make_archived("b"))

        with MetadataLog(path) as log:
            log.record(make_archived("c"))
            assert log.known_names() == {"a", "b", "c"}

    def test_entries_are_never_rewritten(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        with MetadataLog(path) as log:
            log.record(make_archived("a"))
        before = path.read_text()

        with MetadataLog(path) as log:
            log.record(make_archived("b"))

        assert path.read_text().startswith(before)

    def test_replay_preserves_order(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        with MetadataLog(path) as log:
            for name in ["z", "a", "m"]:
                log.record(make_archived(name))

            assert [e.name for e in log.replay()] == ["z", "a", "m"]

    def test_replay_missing_file_is_empty(self, tmp_path: Path) -> None:
        log = MetadataLog(tmp_path / METADATA_FILENAME)

        assert list(log.replay()) == []

    def test_replay_skips_unreadable_lines(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        good = make_archived("a").model_dump_json()
        path.write_text(f"{good}\n\nnot json\n{{\"name\": \"x\"}}\n", encoding="utf-8")

        log = MetadataLog(path)

        assert [e.name for e in log.replay()] == ["a"]

    def test_replay_skips_invalid_utf8_lines(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        good = make_archived("a").model_dump_json().encode()
        path.write_bytes(b"\xff\xfe garbage\n" + good + b"\n")

        log = MetadataLog(path)

        assert [e.name for e in log.replay()] == ["a"]
        assert log.known_names() == {"a"}

    def test_replay_keeps_non_ascii_entries(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        with MetadataLog(path) as log:
            log.record(make_archived("caf\u00e9"))

        assert [e.name for e in MetadataLog(path).replay()] == ["caf\u00e9"]

    def test_truncated_last_line_is_terminated(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILENAME
        good = make_archived("a").model_dump_json()
        path.write_text(f"{good}\n{good[:20]}", encoding="utf-8")

        with MetadataLog(path) as log:
            log.record(make_archived("b"))
            names = [e.name for e in log.replay()]

        assert names == ["a", "b"]
        assert path.read_text().endswith("\n")

    def test_open_failure_raises_archive_error(self, tmp_path: Path) -> None:
        log = MetadataLog(tmp_path / "missing" / METADATA_FILENAME)

        with pytest.raises(ArchiveError):
            log.open()


# ---------------------------------------------------------------------------
# TestEmojiArchive
# ---------------------------------------------------------------------------


class TestEmojiArchive:
    """Tests for EmojiArchive."""

    def test_ensure_exists_creates_parents(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path / "a" / "b" / "emoji")

        archive.ensure_exists()

        assert archive.exists()

    def test_ensure_exists_is_idempotent(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path)

        archive.ensure_exists()
        archive.ensure_exists()

        assert archive.exists()

    def test_ensure_exists_fails_on_file(self, tmp_path: Path) -> None:
        blocker = tmp_path / "emoji"
        blocker.write_text("not a directory")

        with pytest.raises(ArchiveError):
            EmojiArchive(blocker).ensure_exists()

    def test_exists_false_for_missing(self, tmp_path: Path) -> None:
        assert not EmojiArchive(tmp_path / "missing").exists()

    def test_resolve_path(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path)

        assert archive.resolve_path("zuck-abc.png") == tmp_path / "zuck-abc.png"
        assert archive.metadata_path == tmp_path / METADATA_FILENAME

    def test_record_and_known_names(self, tmp_path: Path) -> None:
        with EmojiArchive(tmp_path) as archive:
            archive.record_completion(make_archived("a"))
            assert archive.known_names() == {"a"}

        with EmojiArchive(tmp_path) as archive:
            assert archive.known_names() == {"a"}

    def test_stream_archived_emoji(self, tmp_path: Path) -> None:
        with EmojiArchive(tmp_path) as archive:
            archive.record_completion(make_archived("a"))
            archive.record_completion(make_archived("b", alias_for="a"))

            streamed = list(archive.stream_archived_emoji())

        assert [e.name for e in streamed] == ["a", "b"]
        assert streamed[1].alias_for == "a"

    def test_close_releases_log(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path)
        log = archive.log

        archive.close()

        assert not log.is_open

    @pytest.mark.asyncio
    async def test_write_image(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path)

        size = await archive.write_image("zuck-abc.png", _chunks(b"ab", b"cd"))

        assert size == 4
        assert (tmp_path / "zuck-abc.png").read_bytes() == b"abcd"

    @pytest.mark.asyncio
    async def test_write_image_removes_partial_file(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path)

        with pytest.raises(SlackTransportError):
            await archive.write_image("zuck-abc.png", _failing_chunks())

        assert not (tmp_path / "zuck-abc.png").exists()

    @pytest.mark.asyncio
    async def test_write_image_local_failure(self, tmp_path: Path) -> None:
        archive = EmojiArchive(tmp_path / "missing")

        with pytest.raises(ArchiveError):
            await archive.write_image("zuck-abc.png", _chunks(b"ab"))
