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

"""Git backend for changelogkit.

:class:`GitCLIBackend` implements the :class:`~changelogkit.backends.VCS`
protocol by delegating to ``git`` via :func:`run_command`. Methods are
async; the blocking subprocess call runs in ``asyncio.to_thread()``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from changelogkit.backends._run import CommandResult, run_command
from changelogkit.commit_parsing import RawCommitEntry
from changelogkit.errors import E, ChangelogKitError
from changelogkit.gitlog import LOG_FORMAT, parse_git_log
from changelogkit.logging import get_logger

log = get_logger('changelogkit.backends.git')


class GitCLIBackend:
    """Default :class:`~changelogkit.backends.VCS` implementation using ``git``.

    Args:
        repo_root: Path to the git repository root.
    """

    def __init__(self, repo_root: Path) -> None:
        """Initialize with the git repository root path."""
        self._root = repo_root

    def _git(self, *args: str, quiet: bool = False) -> CommandResult:
        """Run a git command synchronously (called via to_thread)."""
        return run_command(['git', *args], cwd=self._root, quiet=quiet)

    async def log(self, from_ref: str = '', to_ref: str = 'HEAD') -> list[RawCommitEntry]:
        """Return commits in ``from_ref..to_ref``, newest first.

        Raises:
            ChangelogKitError: If ``git log`` fails (unknown ref, not a
                repository).
        """
        to_ref = to_ref or 'HEAD'
        revision = f'{from_ref}..{to_ref}' if from_ref else to_ref
        result = await asyncio.to_thread(self._git, 'log', f'--pretty=format:{LOG_FORMAT}', revision)
        if not result.ok:
            raise ChangelogKitError(
                code=E.GIT_LOG_FAILED,
                message=f'git log {revision} failed: {result.stderr.strip() or result.return_code}',
                hint=f'Check that {revision!r} names existing refs in {self._root}.',
            )
        entries = parse_git_log(result.stdout)
        log.debug('git_log', revision=revision, commits=len(entries))
        return entries

    async def latest_tag(self) -> str:
        """Return the most recent tag reachable from HEAD, or ``""``."""
        result = await asyncio.to_thread(self._git, 'describe', '--tags', '--abbrev=0', quiet=True)
        if not result.ok:
            log.debug('no_tags_found', root=str(self._root))
            return ''
        return result.stdout.strip()

    async def current_ref(self) -> str:
        """Return the current branch name, or the HEAD SHA when detached."""
        result = await asyncio.to_thread(self._git, 'rev-parse', '--abbrev-ref', 'HEAD', quiet=True)
        ref = result.stdout.strip() if result.ok else ''
        if ref and ref != 'HEAD':
            return ref
        sha = await asyncio.to_thread(self._git, 'rev-parse', 'HEAD', quiet=True)
        return sha.stdout.strip() if sha.ok and sha.stdout.strip() else 'HEAD'

    async def remote_url(self, remote: str = 'origin') -> str:
        """Return the URL of ``remote``, or ``""`` if it is not configured."""
        result = await asyncio.to_thread(self._git, 'remote', 'get-url', remote, quiet=True)
        return result.stdout.strip() if result.ok else ''


__all__ = [
    'GitCLIBackend',
]
