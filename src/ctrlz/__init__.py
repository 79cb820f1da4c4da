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

"""Read byte streams up to the first Ctrl-Z (``0x1A``) byte.

Legacy text formats mark logical end-of-file with the substitute character.
:class:`CtrlZReader` wraps any byte source and makes that byte, and
everything after it, indistinguishable from the real end of the stream.

Example::

    from ctrlz import CtrlZReader, MemoryByteSource

    with CtrlZReader(MemoryByteSource.from_bytes(b"foo\\x1abar")) as reader:
        assert reader.read() == b"foo"
"""

from __future__ import annotations

from ._protocols import SENTINEL, BufferedByteSource, ByteSource, DelimitedByteSource
from ._reader import CtrlZReader
from ._sources import DEFAULT_WINDOW_SIZE, MemoryByteSource, StreamByteSource
from .errors import CtrlZError, SourceContractError
from .logging import configure_logging

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "SENTINEL",
    "BufferedByteSource",
    "ByteSource",
    "CtrlZError",
    "CtrlZReader",
    "DelimitedByteSource",
    "MemoryByteSource",
    "SourceContractError",
    "StreamByteSource",
    "configure_logging",
]
