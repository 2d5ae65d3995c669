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

"""Programmatic Python API for changelogkit.

Runs the whole pipeline from Python scripts and CI tooling without going
through the CLI.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ build_changelog()       │ Raw commits in, markdown and next version   │
    │                         │ out. No git, no files.                      │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ changelog_from_git()    │ Fills in the range and repository from git, │
    │                         │ then calls build_changelog().               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ ChangelogResult         │ What came out: markdown, the new version    │
    │                         │ (or None), and the commits that made it.    │
    └─────────────────────────┴─────────────────────────────────────────────┘

Pipeline::

    RawCommitEntry[] ──▶ parse_commits ──▶ classify ──┬──▶ compute_bump
                                                       │         │
                                                       ▼         ▼
                                                  render_changelog(version)

Usage::

    from changelogkit.api import changelog_from_git
    from changelogkit.backends import GitCLIBackend
    from changelogkit.config import load_config

    config = load_config(root)
    result = await changelog_from_git(GitCLIBackend(root), config, bump=True)
    print(result.new_version)
    print(result.markdown)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass, field

from changelogkit.backends import VCS
from changelogkit.changelog import render_changelog
from changelogkit.classify import classify
from changelogkit.commit_parsing import BumpType, ConventionalCommit, RawCommitEntry, parse_commits
from changelogkit.config import ChangelogConfig, validate_config
from changelogkit.logging import get_logger
from changelogkit.repo import parse_repo
from changelogkit.versioning import compute_bump, parse_version

logger = get_logger(__name__)


@dataclass
class ChangelogResult:
    """Result of one pipeline run.

    Attributes:
        markdown: The rendered changelog block.
        new_version: The version in the heading, or ``None`` when no
            version was requested or none could be determined.
        commits: Commits that survived classification, in log order.
        dropped: Number of parsed commits the classifier removed.
        config: The configuration the run used, with any git-derived
            range and repository filled in.
    """

    markdown: str
    new_version: str | None = None
    commits: list[ConventionalCommit] = field(default_factory=list)
    dropped: int = 0
    config: ChangelogConfig | None = None

    @property
    def bumped(self) -> bool:
        """Whether a new version was determined."""
        return self.new_version is not None


def build_changelog(
    entries: Sequence[RawCommitEntry],
    config: ChangelogConfig,
    *,
    bump: bool = False,
    override: BumpType | None = None,
    new_version: str | None = None,
) -> ChangelogResult:
    """Parse, classify, version and render a set of raw commits.

    Args:
        entries: Raw log entries, newest first.
        config: Configuration; validated before anything is parsed.
        bump: Compute the next version from the commits.
        override: Force this bump type (implies ``bump``).
        new_version: Use this version as-is; wins over ``bump``.

    Returns:
        A :class:`ChangelogResult`. The heading reads ``Unreleased`` when
        no version was requested or none could be determined.

    Raises:
        ChangelogKitError: If the configuration or ``new_version`` is
            invalid.
    """
    validate_config(config)

    parsed = parse_commits(list(entries), config)
    commits = classify(parsed, config)
    dropped = len(parsed) - len(commits)
    if dropped:
        logger.debug('commits_dropped', dropped=dropped, kept=len(commits))

    version: str | None = None
    if new_version:
        version = str(parse_version(new_version))
    elif bump or override is not None:
        version = compute_bump(commits, config, override)
        if version is None:
            logger.warning('version_not_bumped', current_version=config.current_version, commits=len(commits))
        else:
            logger.info('version_bumped', current_version=config.current_version, new_version=version)

    markdown = render_changelog(commits, config, version or '')
    logger.info('changelog_generated', commits=len(commits), version=version or 'Unreleased')
    return ChangelogResult(
        markdown=markdown,
        new_version=version,
        commits=commits,
        dropped=dropped,
        config=config,
    )


async def changelog_from_git(
    vcs: VCS,
    config: ChangelogConfig,
    *,
    bump: bool = False,
    override: BumpType | None = None,
    new_version: str | None = None,
) -> ChangelogResult:
    """Read commits from git and run :func:`build_changelog`.

    An unset ``from_ref`` defaults to the latest tag (full history when
    there is none), an unset ``to_ref`` to the current branch, and an
    unset ``repo`` to the ``origin`` remote.

    Args:
        vcs: Git backend.
        config: Configuration.
        bump: Compute the next version from the commits.
        override: Force this bump type.
        new_version: Use this version as-is.

    Returns:
        A :class:`ChangelogResult`.

    Raises:
        ChangelogKitError: If the configuration is invalid or git fails.
    """
    validate_config(config)

    from_ref = config.from_ref or await vcs.latest_tag()
    to_ref = config.to_ref or await vcs.current_ref()
    repo = config.repo
    if repo is None:
        url = await vcs.remote_url()
        repo = parse_repo(url) if url else None
    config = dataclasses.replace(config, from_ref=from_ref, to_ref=to_ref, repo=repo)
    logger.debug('git_range', from_ref=from_ref or '(root)', to_ref=to_ref)

    entries = await vcs.log(from_ref, to_ref)
    return build_changelog(entries, config, bump=bump, override=override, new_version=new_version)


__all__ = [
    'ChangelogResult',
    'build_changelog',
    'changelog_from_git',
]
