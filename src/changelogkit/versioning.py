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

"""Semver bump computation from classified commits.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ BumpType            │ One of: major, minor, patch. The "strongest"   │
    │                     │ commit in the set decides.                     │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Breaking change     │ ``feat!:`` or a ``BREAKING CHANGE:`` footer.   │
    │                     │ Always MAJOR, whatever its type says.          │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Major on zero       │ On ``0.x`` versions a breaking change bumps    │
    │                     │ MINOR instead (``0.4.2`` → ``0.5.0``), unless  │
    │                     │ the caller forces the bump type.               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ None                │ Nothing bump-worthy. Release flows treat this  │
    │                     │ as fatal, preview flows ignore it.             │
    └─────────────────────┴────────────────────────────────────────────────┘

Bump precedence::

    any breaking commit ───────────────▶ MAJOR  (MINOR on 0.x)
    any type with semver = "minor" ────▶ MINOR
    any type with semver = "patch" ────▶ PATCH
    otherwise ─────────────────────────▶ None

Usage::

    from changelogkit.versioning import compute_bump

    new_version = compute_bump(commits, config)            # e.g. "1.3.0"
    forced = compute_bump(commits, config, BumpType.MAJOR)  # "2.0.0"
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from changelogkit.commit_parsing import BumpType, ConventionalCommit, max_bump
from changelogkit.errors import E, ChangelogKitError

if TYPE_CHECKING:
    from changelogkit.config import ChangelogConfig

# MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD], optional leading "v".
SEMVER_PATTERN: re.Pattern[str] = re.compile(
    r'^[vV]?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)'
    r'(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?'
    r'(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$',
)


@dataclass(frozen=True)
class SemVer:
    """A parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: str = ''
    build: str = ''

    def __str__(self) -> str:
        """Format as ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``."""
        text = f'{self.major}.{self.minor}.{self.patch}'
        if self.prerelease:
            text += f'-{self.prerelease}'
        if self.build:
            text += f'+{self.build}'
        return text


def parse_version(version: str) -> SemVer:
    """Parse a semantic version string.

    Args:
        version: Version string such as ``"1.2.3"`` or ``"v2.0.0-rc.1"``.

    Returns:
        The parsed :class:`SemVer`.

    Raises:
        ChangelogKitError: If the string is not a semantic version.
    """
    match = SEMVER_PATTERN.match(version.strip()) if isinstance(version, str) else None
    if match is None:
        raise ChangelogKitError(
            code=E.VERSION_INVALID,
            message=f'Version {version!r} is not valid (expected MAJOR.MINOR.PATCH)',
            hint='Use a version string like "1.2.3", optionally with a "-rc.1" pre-release suffix.',
        )
    return SemVer(
        major=int(match.group('major')),
        minor=int(match.group('minor')),
        patch=int(match.group('patch')),
        prerelease=match.group('prerelease') or '',
        build=match.group('build') or '',
    )


def apply_bump(version: str, bump: BumpType) -> str:
    """Apply a bump to a version string.

    A pre-release is first promoted to its release when that release
    already satisfies the bump: ``1.3.0-rc.1`` bumped MINOR is ``1.3.0``,
    while ``1.2.3-rc.1`` bumped MINOR is ``1.3.0`` too. Build metadata
    is dropped.

    Args:
        version: Current version (e.g. ``"0.5.0"``).
        bump: The bump type to apply.

    Returns:
        The new version string.

    Raises:
        ChangelogKitError: If ``version`` is not a semantic version.
    """
    v = parse_version(version)
    pre = bool(v.prerelease)

    if bump == BumpType.MAJOR:
        major = v.major if pre and v.minor == 0 and v.patch == 0 else v.major + 1
        return str(SemVer(major, 0, 0))
    if bump == BumpType.MINOR:
        minor = v.minor if pre and v.patch == 0 else v.minor + 1
        return str(SemVer(v.major, minor, 0))
    patch = v.patch if pre else v.patch + 1
    return str(SemVer(v.major, v.minor, patch))


def commit_bump(commit: ConventionalCommit, config: ChangelogConfig) -> BumpType | None:
    """Return the version impact of one commit."""
    if commit.is_breaking:
        return BumpType.MAJOR
    type_spec = config.types.get(commit.type)
    return type_spec.semver if type_spec is not None else None


def determine_bump(commits: Sequence[ConventionalCommit], config: ChangelogConfig) -> BumpType | None:
    """Return the strongest bump implied by a set of commits, or ``None``."""
    bump: BumpType | None = None
    for commit in commits:
        bump = max_bump(bump, commit_bump(commit, config))
        if bump == BumpType.MAJOR:
            break
    return bump


def compute_bump(
    commits: Sequence[ConventionalCommit],
    config: ChangelogConfig,
    override: BumpType | None = None,
) -> str | None:
    """Compute the next version for ``config.current_version``.

    Args:
        commits: Classified commits.
        config: Resolved configuration; only read.
        override: Forced bump type. Applied as-is, without the
            major-on-zero demotion.

    Returns:
        The new version string, or ``None`` when no commit implies a bump
        and no override was given.

    Raises:
        ChangelogKitError: If ``config.current_version`` is invalid.
    """
    if override is not None:
        return apply_bump(config.current_version, override)

    bump = determine_bump(commits, config)
    if bump is None:
        return None

    if bump == BumpType.MAJOR and parse_version(config.current_version).major == 0:
        bump = BumpType.MINOR
    return apply_bump(config.current_version, bump)


__all__ = [
    'SEMVER_PATTERN',
    'SemVer',
    'apply_bump',
    'commit_bump',
    'compute_bump',
    'determine_bump',
    'parse_version',
]
