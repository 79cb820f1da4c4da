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

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers.streams import LegacyFileFactory


@pytest.fixture
def legacy_file(tmp_path: Path) -> LegacyFileFactory:
    """Return a factory writing byte content into ``tmp_path``."""

    def factory(content: bytes, *, name: str = "legacy.txt") -> Path:
        path = tmp_path / name
        _ = path.write_bytes(content)
        return path

    return factory
