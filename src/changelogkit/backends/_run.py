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

"""Subprocess wrapper used by the git backend.

Every ``git`` invocation goes through :func:`run_command`, which logs the
call, enforces a timeout, and returns a :class:`CommandResult` instead of
raising on a non-zero exit. Callers decide what a failure means.
"""

from __future__ import annotations

import subprocess  # noqa: S404 - subprocess is the core purpose of this module
import time
from dataclasses import dataclass
from pathlib import Path

from changelogkit.logging import get_logger

log = get_logger('changelogkit.backends.run')

# Reading a log is quick; anything slower than this is stuck.
DEFAULT_TIMEOUT_SECONDS = 60


@dataclass(frozen=True)
class CommandResult:
    """Result of a subprocess invocation.

    Attributes:
        command: The command that was executed.
        return_code: Process exit code (0 = success).
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration: Wall-clock duration in milliseconds.
        dry_run: Whether the command was only logged.
    """

    command: list[str]
    return_code: int
    stdout: str = ''
    stderr: str = ''
    duration: float = 0.0
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.return_code == 0

    @property
    def command_str(self) -> str:
        """The command as a single shell-style string."""
        return ' '.join(self.command)


def run_command(
    cmd: list[str],
    *,
    cwd: Path | str | None = None,
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    dry_run: bool = False,
    quiet: bool = False,
) -> CommandResult:
    """Execute a command, capturing its text output.

    Args:
        cmd: Command and arguments.
        cwd: Working directory for the command.
        timeout: Maximum seconds to wait before killing the process.
        dry_run: Log the command and return a synthetic success.
        quiet: Log a non-zero exit at debug level. For lookups where
            failure is an expected answer (no tags, no remote).

    Returns:
        A :class:`CommandResult`; non-zero exits are returned, not raised.

    Raises:
        subprocess.TimeoutExpired: If the command exceeds ``timeout``.
        FileNotFoundError: If the executable is not installed.
    """
    cmd_str = ' '.join(cmd)
    log.debug('run_command', cmd=cmd_str, cwd=str(cwd or '.'), dry_run=dry_run)

    if dry_run:
        log.info('dry_run', cmd=cmd_str)
        return CommandResult(command=cmd, return_code=0, dry_run=True)

    start = time.monotonic()
    try:
        proc = subprocess.run(  # noqa: S603 - arguments come from the backend, never a shell
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.error('command_timeout', cmd=cmd_str, timeout=timeout)
        raise
    duration = (time.monotonic() - start) * 1000

    result = CommandResult(
        command=cmd,
        return_code=proc.returncode,
        stdout=proc.stdout or '',
        stderr=proc.stderr or '',
        duration=duration,
    )
    if result.ok:
        log.debug('command_ok', cmd=cmd_str, duration=duration)
    else:
        log_failure = log.debug if quiet else log.warning
        log_failure(
            'command_failed',
            cmd=cmd_str,
            return_code=result.return_code,
            stderr=result.stderr[:500],
            duration=duration,
        )
    return result


__all__ = [
    'DEFAULT_TIMEOUT_SECONDS',
    'CommandResult',
    'run_command',
]
