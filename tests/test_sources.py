"""Tests for the stdin and spool-directory notification sources."""

import asyncio
import io
import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from xsnotify.relay.sources.spool import SpoolDirectorySource
from xsnotify.relay.sources.stdin import StdinSource


class TestStdinSource:
    @pytest.mark.asyncio
    async def test_reads_one_event_per_line(self):
        stream = io.StringIO(
            '{"source_app": "Discord", "title": "Hi", "body": "there"}\n'
            '{"source_app": "Steam", "title": "Friend online"}\n'
        )
        source = StdinSource(stream)

        first = await source.listen()
        second = await source.listen()

        assert (first.source_app, first.title, first.body) == ("Discord", "Hi", "there")
        assert (second.source_app, second.title, second.body) == ("Steam", "Friend online", "")

    @pytest.mark.asyncio
    async def test_skips_blank_and_malformed_lines(self):
        stream = io.StringIO(
            "\n"
            "not json\n"
            '{"title": "missing app"}\n'
            '{"source_app": "Discord", "title": "ok"}\n'
        )
        event = await StdinSource(stream).listen()
        assert event.title == "ok"

    @pytest.mark.asyncio
    async def test_waits_after_end_of_input(self):
        source = StdinSource(io.StringIO(""))
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(source.listen(), timeout=0.1)

    @pytest.mark.asyncio
    async def test_closed_stream_parks_until_cancelled(self):
        source = StdinSource(io.StringIO('{"source_app": "Discord", "title": "last"}\n'))
        assert (await source.listen()).title == "last"

        listener = asyncio.create_task(source.listen())
        await asyncio.sleep(0.05)
        assert not listener.done()

        listener.cancel()
        with pytest.raises(asyncio.CancelledError):
            await listener

    def test_capabilities(self):
        assert StdinSource.supports_listener is True
        assert StdinSource.supports_polling is False


def _write_event(path, mtime, **fields):
    path.write_text(json.dumps(fields))
    os.utime(path, (mtime, mtime))


class TestSpoolDirectorySource:
    @pytest.mark.asyncio
    async def test_connect_creates_directory(self, temp_dir):
        source = SpoolDirectorySource(temp_dir / "spool")
        await source.connect()
        assert (temp_dir / "spool").is_dir()

    @pytest.mark.asyncio
    async def test_poll_consumes_oldest_first(self, temp_dir):
        _write_event(temp_dir / "b.json", 2000, source_app="Steam", title="second")
        _write_event(temp_dir / "a.json", 1000, source_app="Discord", title="first")
        source = SpoolDirectorySource(temp_dir)

        events = await source.poll()

        assert [e.title for e in events] == ["first", "second"]
        assert list(temp_dir.glob("*.json")) == []
        assert await source.poll() == []

    @pytest.mark.asyncio
    async def test_malformed_file_moved_aside(self, temp_dir):
        (temp_dir / "broken.json").write_text("{not json")
        _write_event(temp_dir / "ok.json", 1000, source_app="Discord", title="ok")
        source = SpoolDirectorySource(temp_dir)

        events = await source.poll()

        assert [e.title for e in events] == ["ok"]
        assert (temp_dir / "broken.json.bad").exists()
        assert not (temp_dir / "broken.json").exists()

    @pytest.mark.asyncio
    async def test_listen_returns_one_at_a_time(self, temp_dir):
        _write_event(temp_dir / "a.json", 1000, source_app="Discord", title="first")
        _write_event(temp_dir / "b.json", 2000, source_app="Discord", title="second")
        source = SpoolDirectorySource(temp_dir, listen_interval=0.01)

        assert (await source.listen()).title == "first"
        assert (await source.listen()).title == "second"

    @pytest.mark.asyncio
    async def test_listen_waits_for_new_file(self, temp_dir):
        source = SpoolDirectorySource(temp_dir, listen_interval=0.01)
        listener = asyncio.create_task(source.listen())
        await asyncio.sleep(0.05)
        assert not listener.done()

        _write_event(temp_dir / "late.json", 1000, source_app="Discord", title="late")
        event = await asyncio.wait_for(listener, timeout=2)
        assert event.title == "late"

    @pytest.mark.asyncio
    async def test_unreadable_entry_does_not_lose_batch(self, temp_dir):
        _write_event(temp_dir / "a.json", 1000, source_app="Discord", title="first")
        (temp_dir / "z.json").mkdir()
        source = SpoolDirectorySource(temp_dir)

        events = await source.poll()

        assert [e.title for e in events] == ["first"]
        assert not (temp_dir / "a.json").exists()
        assert (temp_dir / "z.json.bad").is_dir()
        assert await source.poll() == []

    @pytest.mark.asyncio
    async def test_entry_that_cannot_be_moved_is_ignored(self, temp_dir):
        (temp_dir / "z.json").mkdir()
        _write_event(temp_dir / "b.json", 2000, source_app="Discord", title="later")
        source = SpoolDirectorySource(temp_dir)

        with patch.object(Path, "rename", side_effect=PermissionError("denied")) as rename:
            first = await source.poll()
            _write_event(temp_dir / "c.json", 3000, source_app="Discord", title="newer")
            second = await source.poll()

        assert [e.title for e in first] == ["later"]
        assert [e.title for e in second] == ["newer"]
        assert rename.call_count == 1
        assert (temp_dir / "z.json").is_dir()

    @pytest.mark.asyncio
    async def test_file_removed_before_read_is_skipped(self, temp_dir):
        _write_event(temp_dir / "a.json", 1000, source_app="Discord", title="first")
        _write_event(temp_dir / "b.json", 2000, source_app="Discord", title="second")
        source = SpoolDirectorySource(temp_dir)
        real_read = Path.read_bytes

        def read_bytes(path):
            if path.name == "a.json":
                path.unlink()
            return real_read(path)

        with patch.object(Path, "read_bytes", autospec=True, side_effect=read_bytes):
            events = await source.poll()

        assert [e.title for e in events] == ["second"]
        assert list(temp_dir.glob("*.json")) == []
