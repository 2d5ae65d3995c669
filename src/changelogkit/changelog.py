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

"""Markdown changelog rendering from classified commits.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ ChangelogSection        │ A group of commits under one heading, e.g.  │
    │                         │ "Features" or "Bug Fixes".                  │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ render_changelog()      │ Commits in, markdown out. Same input, same  │
    │                         │ bytes: no dates, no randomness.             │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ write_changelog()       │ Splices the rendered block into an existing │
    │                         │ CHANGELOG.md above the previous release.    │
    └─────────────────────────┴─────────────────────────────────────────────┘

Output shape::

    ## 1.3.0

    [compare changes](https://github.com/o/r/compare/v1.2.3...v1.3.0)

    ### ⚠️ Breaking Changes

    - **api:** remove legacy mode ([a1b2c3d](https://github.com/o/r/commit/a1b2c3d...))

    ### Features

    - **api:** add foo ([e4f5a6b](...), [#12](https://github.com/o/r/pull/12))
    - **api:** remove legacy mode ([a1b2c3d](...))

    ### Bug Fixes

    - bar (9c8d7e6)
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from changelogkit.commit_parsing import Author, ConventionalCommit
from changelogkit.config import ChangelogConfig
from changelogkit.errors import E, ChangelogKitError
from changelogkit.logging import get_logger
from changelogkit.repo import format_commit_link, format_compare_link, format_reference

logger = get_logger(__name__)

BREAKING_TITLE = '⚠️ Breaking Changes'
CONTRIBUTORS_TITLE = '❤️ Contributors'

# A release heading in an existing changelog; new blocks go above the first one.
ENTRY_HEADING_PATTERN: re.Pattern[str] = re.compile(r'^###?\s+.*$', re.MULTILINE)

_CHANGELOG_HEADING = '# Changelog\n'

UNRELEASED_TITLE = 'Unreleased'

_UNRELEASED_HEADING_RE = re.compile(rf'^(?P<hashes>###?)[ \t]+{UNRELEASED_TITLE}[ \t]*$', re.MULTILINE)

# Where an Unreleased block ends, keyed by its heading level. At level 3
# only a version-like title closes it, since sections share the level.
_BLOCK_END_RE: dict[int, re.Pattern[str]] = {
    2: re.compile(r'^#{1,2}\s+', re.MULTILINE),
    3: re.compile(r'^(?:#{1,2}\s+|###\s+v?\d)', re.MULTILINE),
}

_NOREPLY_HANDLE_RE = re.compile(r'^(?:\d+\+)?(?P<handle>[^@]+)@users\.noreply\.github\.com$', re.IGNORECASE)


@dataclass
class ChangelogSection:
    """A group of commits under one heading.

    Attributes:
        title: Section heading (e.g. ``"Features"``).
        commits: Commits in this section, in log order.
    """

    title: str
    commits: list[ConventionalCommit] = field(default_factory=list)


def group_commits(
    commits: Sequence[ConventionalCommit],
    config: ChangelogConfig,
) -> list[ChangelogSection]:
    """Group commits into ordered sections.

    Breaking changes come first, then one section per configured type in
    ``config.types`` order. A breaking commit is listed both under
    Breaking Changes and under its own type. Empty sections are omitted.
    """
    sections: list[ChangelogSection] = []

    breaking = [c for c in commits if c.is_breaking]
    if breaking:
        sections.append(ChangelogSection(title=BREAKING_TITLE, commits=breaking))

    for type_key, type_spec in config.types.items():
        bucket = [c for c in commits if c.type == type_key]
        if bucket:
            sections.append(ChangelogSection(title=type_spec.title, commits=bucket))

    return sections


def _is_excluded(author: Author, config: ChangelogConfig) -> bool:
    return author.name in config.exclude_authors or (bool(author.email) and author.email in config.exclude_authors)


def _handle(author: Author) -> str:
    match = _NOREPLY_HANDLE_RE.match(author.email)
    return match.group('handle') if match else author.name


def render_entry(commit: ConventionalCommit, config: ChangelogConfig) -> str:
    """Render one commit as a markdown list item.

    Format: ``- **scope:** description (sha, #pr, #issue) by @author``
    """
    parts: list[str] = ['- ']
    if commit.scope:
        parts.append(f'**{commit.scope}:** ')
    parts.append(commit.description)

    refs: list[str] = []
    if commit.hash:
        refs.append(format_commit_link(commit.hash, config.repo))
    seen: set[str] = set()
    for kind in ('pull-request', 'issue'):
        for ref in commit.references:
            if ref.type == kind and ref.value not in seen:
                seen.add(ref.value)
                refs.append(format_reference(ref, config.repo))
    if refs:
        parts.append(f' ({", ".join(refs)})')

    author = commit.author
    if config.show_authors and author is not None and author.name and not _is_excluded(author, config):
        parts.append(f' by @{_handle(author)}')

    return ''.join(parts)


def _render_contributors(commits: Sequence[ConventionalCommit], config: ChangelogConfig) -> list[str]:
    emails: dict[str, list[str]] = {}
    for commit in commits:
        for author in commit.authors:
            if not author.name or '[bot]' in author.name or _is_excluded(author, config):
                continue
            known = emails.setdefault(author.name, [])
            if author.email and author.email not in known:
                known.append(author.email)

    lines: list[str] = []
    for name, addresses in emails.items():
        public = next((e for e in addresses if 'noreply' not in e), '')
        lines.append(f'- {name} <{public}>' if public else f'- {name}')
    return lines


def render_changelog(
    commits: Sequence[ConventionalCommit],
    config: ChangelogConfig,
    version: str,
) -> str:
    """Render classified commits as a markdown changelog block.

    Args:
        commits: Classified commits, in log order.
        config: Resolved configuration.
        version: Version for the heading; ``"Unreleased"`` when empty.

    Returns:
        Markdown starting with the version heading and ending with a
        single newline.
    """
    section_prefix = '###'
    lines: list[str] = [f'{"#" * config.heading_level} {version or UNRELEASED_TITLE}', '']

    if config.repo is not None and config.from_ref:
        to_ref = f'{config.tag_prefix}{version}' if version else (config.to_ref or 'HEAD')
        lines.extend([format_compare_link(config.from_ref, to_ref, config.repo), ''])

    for section in group_commits(commits, config):
        lines.extend([f'{section_prefix} {section.title}', ''])
        lines.extend(render_entry(commit, config) for commit in section.commits)
        lines.append('')

    if config.contributors:
        contributors = _render_contributors(commits, config)
        if contributors:
            lines.extend([f'{section_prefix} {CONTRIBUTORS_TITLE}', '', *contributors])

    return '\n'.join(lines).rstrip() + '\n'


def splice_changelog(existing: str, rendered: str) -> str:
    """Insert a rendered block above the newest entry of a changelog.

    An existing ``Unreleased`` block is replaced by the new block, up to
    the next release heading. Otherwise the insertion point is the first
    line matching ``^###?\\s+``. When the changelog has no entries yet,
    the block is appended.
    """
    block = rendered.rstrip('\n')
    unreleased = _UNRELEASED_HEADING_RE.search(existing)
    if unreleased:
        level = len(unreleased.group('hashes'))
        end = _BLOCK_END_RE[level].search(existing, unreleased.end())
        if end:
            return existing[: unreleased.start()] + block + '\n\n' + existing[end.start() :]
        return existing[: unreleased.start()] + block + '\n'
    match = ENTRY_HEADING_PATTERN.search(existing)
    if match:
        return existing[: match.start()] + block + '\n\n' + existing[match.start() :]
    return existing.rstrip('\n') + '\n\n' + block + '\n'


def write_changelog(
    changelog_path: Path,
    rendered: str,
    *,
    dry_run: bool = False,
) -> bool:
    """Write a rendered block into a CHANGELOG.md file.

    Creates the file with a ``# Changelog`` heading when missing. If the
    version heading line is already present the write is skipped, so
    re-runs do not duplicate entries. An ``Unreleased`` block is
    refreshed in place instead (see :func:`splice_changelog`).

    Args:
        changelog_path: Path to the CHANGELOG.md file.
        rendered: Output of :func:`render_changelog`.
        dry_run: Log what would happen without writing.

    Returns:
        True if the file was written (or would be in dry-run), False if
        skipped as a duplicate or unchanged.

    Raises:
        ChangelogKitError: If the file cannot be read or written.
    """
    first_line = rendered.split('\n', 1)[0].strip()

    try:
        existing = changelog_path.read_text(encoding='utf-8') if changelog_path.exists() else _CHANGELOG_HEADING
    except OSError as exc:
        raise ChangelogKitError(
            code=E.CHANGELOG_WRITE_FAILED,
            message=f'Failed to read {changelog_path}: {exc}',
        ) from exc

    is_unreleased = _UNRELEASED_HEADING_RE.match(first_line) is not None
    if not is_unreleased and any(line.strip() == first_line for line in existing.splitlines()):
        logger.info('changelog_skip_duplicate', path=str(changelog_path), version_heading=first_line)
        return False

    new_content = splice_changelog(existing, rendered)
    if new_content == existing:
        logger.info('changelog_unchanged', path=str(changelog_path), version_heading=first_line)
        return False

    if dry_run:
        logger.info('changelog_dry_run', path=str(changelog_path), version_heading=first_line)
        return True

    try:
        changelog_path.parent.mkdir(parents=True, exist_ok=True)
        changelog_path.write_text(new_content, encoding='utf-8')
    except OSError as exc:
        raise ChangelogKitError(
            code=E.CHANGELOG_WRITE_FAILED,
            message=f'Failed to write {changelog_path}: {exc}',
        ) from exc
    logger.info('changelog_written', path=str(changelog_path), version_heading=first_line)
    return True


__all__ = [
    'BREAKING_TITLE',
    'CONTRIBUTORS_TITLE',
    'ENTRY_HEADING_PATTERN',
    'UNRELEASED_TITLE',
    'ChangelogSection',
    'group_commits',
    'render_changelog',
    'render_entry',
    'splice_changelog',
    'write_changelog',
]
