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

"""Base exception hierarchy for :mod:`ctrlz`."""

from __future__ import annotations


class CtrlZError(Exception):
    """Base class for all ctrlz exceptions.

    Errors raised by a wrapped source are never converted into this type;
    they reach the caller exactly as the source raised them. Only failures
    detected by the reader itself derive from :class:`CtrlZError`.

    Example:
        Catch any library-specific error::

            try:
                data = reader.read()
            except CtrlZError as e:
                logger.error("Reader error: %s", e)
    """


class SourceContractError(CtrlZError, OSError):
    """Raised when a wrapped source reports an impossible byte count.

    A source's ``readinto`` must return a count between zero and the length
    of the buffer it was handed. Anything else means the source is broken and
    the buffer contents cannot be trusted.

    Note:
        This exception also inherits from ``OSError``, so handlers written
        for ordinary I/O failures of the underlying stream catch it as well.
    """


__all__ = [
    "CtrlZError",
    "SourceContractError",
]
