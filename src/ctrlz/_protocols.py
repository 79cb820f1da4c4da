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

"""Capability protocols for byte sources wrapped by :class:`CtrlZReader`.

A source only has to implement :class:`ByteSource`. The delimited and
buffered capabilities are optional and are detected at call time.
"""

from __future__ import annotations

from collections.abc import Buffer
from typing import Final, Protocol, runtime_checkable

__all__ = [
    "SENTINEL",
    "BufferedByteSource",
    "ByteSource",
    "DelimitedByteSource",
]

#: The substitute character (Ctrl-Z) marking logical end-of-file.
SENTINEL: Final[int] = 0x1A


@runtime_checkable
class ByteSource(Protocol):
    """Minimal byte-producing capability.

    Matches the ``readinto`` contract of :class:`io.RawIOBase`: fill a prefix
    of ``buffer`` and return how many bytes were written. Zero means
    end-of-stream; ``None`` means a non-blocking source has nothing ready.
    """

    def readinto(self, buffer: Buffer, /) -> int | None:
        """Read bytes into ``buffer``.

        Args:
            buffer: Writable buffer to fill from the start.

        Returns:
            Number of bytes written, 0 at end-of-stream.
        """
        ...


@runtime_checkable
class DelimitedByteSource(ByteSource, Protocol):
    """Byte source with a native read-until-delimiter operation."""

    def read_until(self, delimiter: int, output: bytearray, /) -> int:
        """Append bytes up to and including ``delimiter`` to ``output``.

        Args:
            delimiter: Byte value (0-255) that ends the read.
            output: Growable buffer receiving the bytes.

        Returns:
            Number of bytes appended, 0 at end-of-stream.
        """
        ...


@runtime_checkable
class BufferedByteSource(ByteSource, Protocol):
    """Byte source exposing its internal read-ahead window."""

    def fill_buffer(self) -> bytes:
        """Return the buffered bytes, refilling from below when empty.

        Returns:
            Bytes available without consuming them. Empty at end-of-stream.
        """
        ...

    def consume(self, amount: int, /) -> None:
        """Mark ``amount`` bytes of the current window as read."""
        ...
