# Copyright 2026 Google LLC
#
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
#
# SPDX-License-Identifier: Apache-2.0

"""Version-control backends for changelogkit.

The changelog pipeline itself never touches git. The orchestration layer
talks to an injectable :class:`VCS` implementation, so tests can pass a
fake and other workflows can swap in a different backend.

- :class:`VCS`: read commits, tags, refs and the remote URL.
- :class:`GitCLIBackend`: default implementation shelling out to ``git``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from changelogkit.backends._run import CommandResult, run_command
from changelogkit.backends.git import GitCLIBackend
from changelogkit.commit_parsing import RawCommitEntry


@runtime_checkable
class VCS(Protocol):
    """Protocol for the read-only git operations changelogkit needs."""

    async def log(self, from_ref: str = '', to_ref: str = 'HEAD') -> list[RawCommitEntry]:
        """Return commits in ``from_ref..to_ref``, newest first.

        Args:
            from_ref: Exclusive start of the range; empty for full history.
            to_ref: Inclusive end of the range.
        """
        ...

    async def latest_tag(self) -> str:
        """Return the most recent tag reachable from HEAD, or ``""``."""
        ...

    async def current_ref(self) -> str:
        """Return the current branch name, or the HEAD SHA when detached."""
        ...

    async def remote_url(self, remote: str = 'origin') -> str:
        """Return the URL of ``remote``, or ``""`` if it is not configured."""
        ...


__all__ = [
    'VCS',
    'CommandResult',
    'GitCLIBackend',
    'run_command',
]
