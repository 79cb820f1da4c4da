# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unit tests for the ready-made byte sources."""

from __future__ import annotations

import io
import time
from pathlib import Path

import pytest

from ctrlz import (
    BufferedByteSource,
    ByteSource,
    CtrlZReader,
    DelimitedByteSource,
    MemoryByteSource,
    StreamByteSource,
)
from tests.helpers.streams import LegacyFileFactory


class TestMemoryByteSource:
    """Tests for MemoryByteSource implementation."""

    def test_satisfies_all_capabilities(self) -> None:
        """The source implements every optional capability."""
        source = MemoryByteSource.from_bytes(b"")
        assert isinstance(source, ByteSource)
        assert isinstance(source, DelimitedByteSource)
        assert isinstance(source, BufferedByteSource)

    def test_readinto_fills_buffer(self) -> None:
        """readinto() copies as much as fits."""
        source = MemoryByteSource.from_bytes(b"hello world")
        buffer = bytearray(5)
        assert source.readinto(buffer) == 5
        assert buffer == b"hello"
        assert source.position == 5

    def test_read_until_includes_delimiter(self) -> None:
        """read_until() stops after the delimiter."""
        source = MemoryByteSource.from_bytes(b"a,b,c")
        output = bytearray()
        assert source.read_until(ord(","), output) == 2
        assert source.read_until(ord(","), output) == 2
        assert source.read_until(ord(","), output) == 1
        assert source.read_until(ord(","), output) == 0
        assert output == b"a,b,c"

    @pytest.mark.parametrize("delimiter", [-1, 256])
    def test_read_until_rejects_non_byte_delimiter(self, delimiter: int) -> None:
        """The delimiter must fit in a byte."""
        source = MemoryByteSource.from_bytes(b"abc")
        with pytest.raises(ValueError, match="delimiter"):
            source.read_until(delimiter, bytearray())

    def test_fill_buffer_does_not_consume(self) -> None:
        """fill_buffer() peeks without advancing."""
        source = MemoryByteSource.from_bytes(b"abcdef", window_size=4)
        assert source.fill_buffer() == b"abcd"
        assert source.fill_buffer() == b"abcd"
        source.consume(3)
        assert source.fill_buffer() == b"def"
        assert source.position == 3

    def test_read_until_scales_linearly(self) -> None:
        """Line-by-line delimited reads do not rescan the whole buffer."""
        content = b"x\n" * 100_000
        source = MemoryByteSource.from_bytes(content)
        output = bytearray()
        lines = 0
        started = time.perf_counter()
        while source.read_until(ord("\n"), output):
            lines += 1
        elapsed = time.perf_counter() - started

        assert lines == 100_000
        assert output == content
        assert elapsed < 2.0

    @pytest.mark.parametrize("window_size", [0, -1])
    def test_rejects_non_positive_window(self, window_size: int) -> None:
        """The window must hold at least one byte."""
        with pytest.raises(ValueError, match="window_size"):
            MemoryByteSource.from_bytes(b"", window_size=window_size)

    def test_close_idempotent(self) -> None:
        """close() is safe to call twice."""
        source = MemoryByteSource.from_bytes(b"content")
        source.close()
        source.close()
        assert source.closed

    def test_operations_after_close_raise(self) -> None:
        """A closed source rejects every operation."""
        source = MemoryByteSource.from_bytes(b"content")
        source.close()
        with pytest.raises(ValueError, match="closed"):
            source.readinto(bytearray(1))
        with pytest.raises(ValueError, match="closed"):
            source.read_until(0, bytearray())
        with pytest.raises(ValueError, match="closed"):
            source.fill_buffer()
        with pytest.raises(ValueError, match="closed"):
            source.consume(1)
        with pytest.raises(ValueError, match="closed"):
            _ = source.position


class TestStreamByteSource:
    """Tests for StreamByteSource implementation."""

    def test_wraps_unbuffered_handle(self) -> None:
        """Handles without peek get a BufferedReader."""
        source = StreamByteSource.wrap(io.BytesIO(b"abc"))
        assert source.fill_buffer() == b"abc"

    def test_keeps_buffered_reader(self) -> None:
        """An existing BufferedReader is used as is."""
        handle = io.BufferedReader(io.BytesIO(b"abc"))
        source = StreamByteSource.wrap(handle)
        source.consume(1)
        assert handle.read() == b"bc"

    def test_rejects_unreadable_handle(self, tmp_path: Path) -> None:
        """Write-only handles cannot be wrapped."""
        with (
            (tmp_path / "out.bin").open("wb") as handle,
            pytest.raises(ValueError, match="readable"),
        ):
            StreamByteSource.wrap(handle)

    def test_readinto(self) -> None:
        """readinto() fills the buffer from the stream."""
        source = StreamByteSource.wrap(io.BytesIO(b"hello"))
        buffer = bytearray(8)
        assert source.readinto(buffer) == 5
        assert buffer[:5] == b"hello"
        assert source.readinto(buffer) == 0

    def test_read_until_spans_buffer_refills(self) -> None:
        """read_until() keeps reading when the delimiter is past the window."""
        source = StreamByteSource.wrap(io.BytesIO(b"x" * 10 + b"\nrest"), buffer_size=4)
        output = bytearray()
        assert source.read_until(ord("\n"), output) == 11
        assert output == b"x" * 10 + b"\n"
        assert source.read_until(ord("\n"), output) == 4
        assert source.read_until(ord("\n"), output) == 0

    def test_consume_advances(self) -> None:
        """consume() discards bytes from the window."""
        source = StreamByteSource.wrap(io.BytesIO(b"abcdef"))
        assert source.fill_buffer() == b"abcdef"
        source.consume(4)
        assert source.fill_buffer() == b"ef"

    def test_close_closes_handle(self) -> None:
        """close() closes the wrapped handle."""
        handle = io.BytesIO(b"abc")
        source = StreamByteSource.wrap(handle)
        source.close()
        source.close()
        assert source.closed
        assert handle.closed

    def test_operations_after_close_raise(self) -> None:
        """A closed source rejects reads."""
        source = StreamByteSource.wrap(io.BytesIO(b"abc"))
        source.close()
        with pytest.raises(ValueError, match="closed"):
            source.readinto(bytearray(1))
        with pytest.raises(ValueError, match="closed"):
            source.fill_buffer()
        with pytest.raises(ValueError, match="closed"):
            source.read_until(0, bytearray())
        with pytest.raises(ValueError, match="closed"):
            source.consume(1)

    def test_reads_legacy_file(self, legacy_file: LegacyFileFactory) -> None:
        """A file with a Ctrl-Z terminator reads as its text only."""
        path = legacy_file(b"LINE 1\r\nLINE 2\r\n\x1a\x00\x00\x00")

        with CtrlZReader(StreamByteSource.wrap(path.open("rb"))) as reader:
            assert reader.readlines() == [b"LINE 1\r\n", b"LINE 2\r\n"]

    def test_reader_read_until_over_file(self, legacy_file: LegacyFileFactory) -> None:
        """Delimited reads over a file drop the over-read tail."""
        path = legacy_file(b"one\ntw\x1ao\n")

        with CtrlZReader(StreamByteSource.wrap(path.open("rb"))) as reader:
            output = bytearray()
            assert reader.read_until(ord("\n"), output) == 4
            assert reader.read_until(ord("\n"), output) == 2
            assert reader.read_until(ord("\n"), output) == 0
            assert output == b"one\ntw"
