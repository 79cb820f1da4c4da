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

"""Ready-made byte sources for :class:`CtrlZReader`.

Both sources implement every optional capability: delimited reads and the
fill_buffer/consume read-ahead window.

Implementations:
    MemoryByteSource: Source backed by an io.BytesIO buffer.
    StreamByteSource: Source backed by any binary file object.
"""

from __future__ import annotations

import io
import re
from collections.abc import Buffer
from dataclasses import dataclass, field
from typing import BinaryIO, Final

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "MemoryByteSource",
    "StreamByteSource",
]

#: Largest read-ahead window handed out by MemoryByteSource.
DEFAULT_WINDOW_SIZE: Final[int] = io.DEFAULT_BUFFER_SIZE

_DELIMITER_PATTERNS: Final = tuple(
    re.compile(re.escape(bytes([value]))) for value in range(256)
)


@dataclass(slots=True)
class MemoryByteSource:
    """Byte source backed by an io.BytesIO buffer.

    ``read_until`` reads through to the delimiter the way a buffered file
    would, so it can return bytes past a sentinel. The reader on top is
    responsible for cutting them off.
    """

    _buffer: io.BytesIO
    _window_size: int = DEFAULT_WINDOW_SIZE
    _closed: bool = field(default=False, init=False)

    @classmethod
    def from_bytes(
        cls, content: bytes, *, window_size: int = DEFAULT_WINDOW_SIZE
    ) -> MemoryByteSource:
        """Create a source reading ``content`` (copied).

        Raises:
            ValueError: If ``window_size`` is not positive.
        """
        if window_size <= 0:
            msg = f"window_size must be positive, got: {window_size}"
            raise ValueError(msg)
        return cls(_buffer=io.BytesIO(content), _window_size=window_size)

    @property
    def closed(self) -> bool:
        """True if the source has been closed."""
        return self._closed

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        self._check_closed()
        return self._buffer.tell()

    def _check_closed(self) -> None:
        """Raise ValueError if closed."""
        if self._closed:
            msg = "I/O operation on closed file"
            raise ValueError(msg)

    def readinto(self, buffer: Buffer, /) -> int:
        """Copy up to ``len(buffer)`` bytes into ``buffer``."""
        self._check_closed()
        return self._buffer.readinto(buffer)

    def read_until(self, delimiter: int, output: bytearray, /) -> int:
        """Append through the next ``delimiter`` (or the end) to ``output``."""
        self._check_closed()
        if not 0 <= delimiter <= 0xFF:
            msg = f"delimiter must be a byte value, got: {delimiter}"
            raise ValueError(msg)
        start = self._buffer.tell()
        with self._buffer.getbuffer() as content:
            match = _DELIMITER_PATTERNS[delimiter].search(content, start)
        chunk = self._buffer.read(-1 if match is None else match.end() - start)
        output += chunk
        return len(chunk)

    def fill_buffer(self) -> bytes:
        """Return up to ``window_size`` unread bytes without consuming them."""
        self._check_closed()
        start = self._buffer.tell()
        window = self._buffer.read(self._window_size)
        _ = self._buffer.seek(start)
        return window

    def consume(self, amount: int, /) -> None:
        """Advance past ``amount`` bytes."""
        self._check_closed()
        _ = self._buffer.seek(amount, io.SEEK_CUR)

    def close(self) -> None:
        """Close the source."""
        if not self._closed:
            self._buffer.close()
            self._closed = True


@dataclass(slots=True)
class StreamByteSource:
    """Byte source backed by a binary file object.

    Handles without ``peek`` (raw files, sockets, BytesIO) are wrapped in an
    io.BufferedReader so the read-ahead window is always available.
    """

    _handle: io.BufferedReader
    _closed: bool = field(default=False, init=False)

    @classmethod
    def wrap(
        cls, handle: BinaryIO, *, buffer_size: int = io.DEFAULT_BUFFER_SIZE
    ) -> StreamByteSource:
        """Adapt ``handle``. The source takes ownership and closes it.

        Raises:
            ValueError: If ``handle`` is not readable.
        """
        if not handle.readable():
            msg = "Stream is not readable"
            raise ValueError(msg)
        if isinstance(handle, io.BufferedReader):
            return cls(_handle=handle)
        return cls(_handle=io.BufferedReader(handle, buffer_size))  # pyright: ignore[reportArgumentType]

    @property
    def closed(self) -> bool:
        """True if the source has been closed."""
        return self._closed

    def _check_closed(self) -> None:
        """Raise ValueError if closed."""
        if self._closed:
            msg = "I/O operation on closed file"
            raise ValueError(msg)

    def readinto(self, buffer: Buffer, /) -> int | None:
        """Read into ``buffer`` with at most one call to the raw stream."""
        self._check_closed()
        return self._handle.readinto1(buffer)

    def read_until(self, delimiter: int, output: bytearray, /) -> int:
        """Append through the next ``delimiter`` (or the end) to ``output``."""
        self._check_closed()
        marker = bytes([delimiter])
        total = 0
        while True:
            window = self._handle.peek()
            if not window:
                return total
            end = window.find(marker)
            chunk = self._handle.read(len(window) if end == -1 else end + 1)
            output += chunk
            total += len(chunk)
            if end != -1:
                return total

    def fill_buffer(self) -> bytes:
        """Return the buffered bytes, reading more only when none are left."""
        self._check_closed()
        return self._handle.peek()

    def consume(self, amount: int, /) -> None:
        """Discard ``amount`` bytes from the front of the buffer."""
        self._check_closed()
        _ = self._handle.read(amount)

    def close(self) -> None:
        """Close the source and the underlying handle."""
        if not self._closed:
            self._handle.close()
            self._closed = True
