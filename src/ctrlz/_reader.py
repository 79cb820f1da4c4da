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

"""Reader that ends the stream at the first Ctrl-Z byte."""

from __future__ import annotations

import io
from collections.abc import Buffer
from typing import override

from ._protocols import SENTINEL, BufferedByteSource, ByteSource, DelimitedByteSource
from .errors import SourceContractError
from .logging import StructuredLogger, get_logger

__all__ = [
    "CtrlZReader",
]

_logger: StructuredLogger = get_logger(__name__, context={"component": "reader"})


class CtrlZReader(io.RawIOBase):
    """Wrap a byte source so that ``0x1A`` reads as end-of-stream.

    Reads are forwarded to the wrapped source until the sentinel shows up.
    The sentinel and everything after it are never returned, and from then on
    every read returns nothing, exactly like a source that ran dry.

    Being a :class:`io.RawIOBase`, the reader gets ``read()``, ``readall()``,
    ``readline()`` and line iteration for free and can sit underneath
    :class:`io.BufferedReader` or :class:`io.TextIOWrapper`.

    Example::

        reader = CtrlZReader(MemoryByteSource.from_bytes(b"foo\\x1abar"))
        assert reader.read() == b"foo"
        assert reader.read() == b""

    The reader owns the wrapped source: closing the reader closes it.
    """

    def __init__(self, source: ByteSource) -> None:
        super().__init__()
        self._source = source
        self._truncated = False
        self._window_limit: int | None = None

    @override
    def readable(self) -> bool:
        return True

    @override
    def readinto(self, buffer: Buffer, /) -> int | None:
        """Read bytes into ``buffer``, stopping short of the sentinel.

        Returns:
            Number of bytes before the sentinel, or whatever the source
            returned when no sentinel was read.

        Raises:
            ValueError: If the reader is closed.
            SourceContractError: If the source reports more bytes than fit.
        """
        self._check_closed()
        if self._truncated:
            return 0

        view = memoryview(buffer).cast("B")
        n = self._source.readinto(view)
        if n is None:
            return None
        if not 0 <= n <= len(view):
            raise SourceContractError("buffer smaller than amount of bytes read")

        index = view[:n].tobytes().find(SENTINEL)
        if index == -1:
            self._advance_window(n)
            return n
        self._truncate("readinto", index)
        return index

    def read_until(self, delimiter: int, output: bytearray, /) -> int:
        """Append bytes up to and including ``delimiter`` to ``output``.

        Sources implementing :class:`DelimitedByteSource` are delegated to and
        whatever they appended past a sentinel is cut off again. Other sources
        are read one byte at a time so nothing past the sentinel is consumed.

        Returns:
            Number of bytes appended. Zero once the stream has ended.

        Raises:
            ValueError: If the reader is closed or ``delimiter`` is not a byte.
        """
        self._check_closed()
        if not 0 <= delimiter <= 0xFF:
            msg = f"delimiter must be a byte value, got: {delimiter}"
            raise ValueError(msg)
        if self._truncated:
            return 0

        if not isinstance(self._source, DelimitedByteSource):
            return self._read_until_bytewise(delimiter, output)

        start = len(output)
        n = self._source.read_until(delimiter, output)
        index = output.find(SENTINEL, start, start + n)
        if index == -1:
            self._advance_window(n)
            return n
        del output[index:]
        self._truncate("read_until", index - start)
        return index - start

    def fill_buffer(self) -> bytes:
        """Return the source's read-ahead window up to the sentinel.

        A window that starts with the sentinel ends the stream. A window with
        the sentinel further in is cut short, and the stream ends once the
        caller consumes up to it and asks again.

        Raises:
            ValueError: If the reader is closed.
            io.UnsupportedOperation: If the source has no read-ahead window.
        """
        self._check_closed()
        source = self._buffered_source()
        if self._truncated:
            return b""

        window = source.fill_buffer()
        index = window.find(SENTINEL)
        if index == -1:
            self._window_limit = None
            return window
        if index == 0:
            self._truncate("fill_buffer", 0)
        self._window_limit = index
        return window[:index]

    def consume(self, amount: int, /) -> None:
        """Mark ``amount`` bytes of the last window as read.

        Consuming up to or past a window that was cut at the sentinel stops at
        the sentinel and ends the stream.
        """
        self._check_closed()
        source = self._buffered_source()
        if self._truncated:
            return

        limit = self._window_limit
        if limit is None or amount < limit:
            source.consume(amount)
            self._advance_window(amount)
            return
        source.consume(limit)
        self._window_limit = None
        self._truncate("consume", limit)

    @override
    def close(self) -> None:
        """Close the reader and the wrapped source."""
        if self.closed:
            return
        try:
            super().close()
        finally:
            close = getattr(self._source, "close", None)
            if callable(close):
                close()

    def _read_until_bytewise(self, delimiter: int, output: bytearray) -> int:
        scratch = bytearray(1)
        count = 0
        while self.readinto(scratch):
            output += scratch
            count += 1
            if scratch[0] == delimiter:
                break
        return count

    def _advance_window(self, amount: int) -> None:
        if self._window_limit is not None:
            self._window_limit -= amount

    def _buffered_source(self) -> BufferedByteSource:
        if not isinstance(self._source, BufferedByteSource):
            msg = f"{type(self._source).__name__} has no read-ahead window"
            raise io.UnsupportedOperation(msg)
        return self._source

    def _truncate(self, operation: str, offset: int) -> None:
        self._truncated = True
        _logger.debug(
            "sentinel reached, stream truncated",
            event="ctrlz.truncated",
            context={"operation": operation, "offset": offset},
        )

    def _check_closed(self) -> None:
        """Raise ValueError if closed."""
        if self.closed:
            msg = "I/O operation on closed file"
            raise ValueError(msg)
