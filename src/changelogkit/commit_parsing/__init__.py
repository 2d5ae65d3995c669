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

"""Commit message parsing.

The :class:`CommitParser` protocol turns one :class:`RawCommitEntry` into
a :class:`ConventionalCommit`. Parsing is total: a subject that does not
follow the convention yields a record with an empty ``type``, which the
classifier later drops.

Usage::

    from changelogkit.commit_parsing import RawCommitEntry, parse_commit

    cc = parse_commit(RawCommitEntry('abc1234', 'Ada <ada@x.io>', 'feat(auth): add OAuth2'))
    assert cc.type == 'feat'
    assert cc.scope == 'auth'
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from changelogkit.commit_parsing._conventional import ConventionalCommitParser
from changelogkit.commit_parsing._types import (
    BUMP_PRECEDENCE,
    Author,
    BumpType,
    CommitParser,
    ConventionalCommit,
    RawCommitEntry,
    Reference,
    max_bump,
)

if TYPE_CHECKING:
    from changelogkit.config import ChangelogConfig

# Module-level singleton for convenience.
_DEFAULT_PARSER = ConventionalCommitParser()


def parse_commit(entry: RawCommitEntry, config: ChangelogConfig | None = None) -> ConventionalCommit:
    """Parse a single raw log entry as a Conventional Commit.

    Args:
        entry: The raw commit.
        config: Optional configuration; its ``gitmoji`` table extends the
            built-in emoji translations.

    Returns:
        The parsed :class:`ConventionalCommit`.
    """
    if config is not None and config.gitmoji:
        return ConventionalCommitParser(gitmoji=config.gitmoji).parse(entry)
    return _DEFAULT_PARSER.parse(entry)


def parse_commits(
    entries: list[RawCommitEntry],
    config: ChangelogConfig | None = None,
) -> list[ConventionalCommit]:
    """Parse a sequence of raw entries, preserving order."""
    parser = ConventionalCommitParser(gitmoji=config.gitmoji) if config is not None else _DEFAULT_PARSER
    return [parser.parse(entry) for entry in entries]


__all__ = [
    'BUMP_PRECEDENCE',
    'Author',
    'BumpType',
    'CommitParser',
    'ConventionalCommit',
    'ConventionalCommitParser',
    'RawCommitEntry',
    'Reference',
    'max_bump',
    'parse_commit',
    'parse_commits',
]
