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

"""Structured error system for changelogkit.

Every error has a unique ``CK-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorCode           │ A unique named ID like "CK-VERSION-INVALID"    │
    │                     │ for each error. Readable at a glance.          │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorInfo           │ A bundle of code + message + hint. Like an     │
    │                     │ error card with a fix suggestion stapled on.   │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ChangelogKitError   │ An exception you can raise. Carries the        │
    │                     │ error card so renderers can display it.        │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ explain()           │ Looks up an error code and prints details.     │
    └─────────────────────┴────────────────────────────────────────────────┘

Code categories::

    CK-CONFIG-*       Configuration errors (raised before any parsing)
    CK-VERSION-*      Current-version and bump errors
    CK-GIT-*          Errors from the git collaborator
    CK-CHANGELOG-*    Changelog file errors

Commit messages that do not follow the convention are *not* errors; they
parse to an empty-type record and are dropped by the classifier.

Usage::

    from changelogkit.errors import ChangelogKitError, E

    raise ChangelogKitError(
        code=E.VERSION_INVALID,
        message="Version 'banana' is not valid (expected X.Y.Z)",
        hint='Set current_version = "1.2.3" in changelogkit.toml.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all changelogkit diagnostic codes."""

    # Configuration
    CONFIG_INVALID_KEY = 'CK-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'CK-CONFIG-INVALID-VALUE'
    CONFIG_MISSING_REQUIRED = 'CK-CONFIG-MISSING-REQUIRED'
    CONFIG_PARSE_ERROR = 'CK-CONFIG-PARSE-ERROR'

    # Versioning
    VERSION_INVALID = 'CK-VERSION-INVALID'
    VERSION_NOT_BUMPED = 'CK-VERSION-NOT-BUMPED'
    VERSION_WRITE_FAILED = 'CK-VERSION-WRITE-FAILED'

    # Git
    GIT_LOG_FAILED = 'CK-GIT-LOG-FAILED'

    # Changelog file
    CHANGELOG_WRITE_FAILED = 'CK-CHANGELOG-WRITE-FAILED'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``CK-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class ChangelogKitError(Exception):
    """Base exception for all changelogkit errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.CONFIG_MISSING_REQUIRED: ErrorInfo(
        code=E.CONFIG_MISSING_REQUIRED,
        message='The commit type table is empty; nothing could ever be included.',
        hint='Remove the [types] override or declare at least one type, e.g. feat = { title = "Features" }.',
    ),
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='Unknown key in changelogkit configuration.',
        hint='Check the key spelling; the error message suggests the closest valid key.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A configuration value has the wrong type or an unsupported value.',
        hint='Check the value against the supported keys documented in changelogkit.config.',
    ),
    E.CONFIG_PARSE_ERROR: ErrorInfo(
        code=E.CONFIG_PARSE_ERROR,
        message='changelogkit.toml or pyproject.toml could not be read or is not valid TOML.',
        hint='Fix the TOML syntax at the reported line, or check the file permissions.',
    ),
    E.VERSION_INVALID: ErrorInfo(
        code=E.VERSION_INVALID,
        message='The current version is not a semantic version (MAJOR.MINOR.PATCH).',
        hint='Set current_version in changelogkit.toml or [project].version in pyproject.toml.',
    ),
    E.VERSION_NOT_BUMPED: ErrorInfo(
        code=E.VERSION_NOT_BUMPED,
        message='No commit since the last release implies a version bump.',
        hint='Pass --major, --minor or --patch to force a bump, or -r to set the version explicitly.',
    ),
    E.VERSION_WRITE_FAILED: ErrorInfo(
        code=E.VERSION_WRITE_FAILED,
        message='The new version could not be written back to the file that holds current_version.',
        hint='Check that the file is writable, or pass --no-write and update the version yourself.',
    ),
    E.GIT_LOG_FAILED: ErrorInfo(
        code=E.GIT_LOG_FAILED,
        message='Reading the git log failed.',
        hint='Check that --from and --to name existing refs and that the directory is a git repository.',
    ),
    E.CHANGELOG_WRITE_FAILED: ErrorInfo(
        code=E.CHANGELOG_WRITE_FAILED,
        message='The changelog file could not be read or written.',
        hint='Check that the output path is a writable file, not a directory.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"CK-VERSION-INVALID"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: ChangelogKitError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style.

    Output format::

        error[CK-VERSION-INVALID]: Version 'banana' is not valid (expected X.Y.Z)
          |
          = hint: Set current_version = "1.2.3" in changelogkit.toml.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {rich_escape(exc.hint)}')
        console.print()
    else:
        print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ChangelogKitError',
    'ErrorCode',
    'ErrorInfo',
    'explain',
    'render_error',
]
