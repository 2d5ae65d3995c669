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

"""Pure types for commit message parsing.

This module has **zero** runtime dependencies beyond the standard library.
Everything here is a frozen dataclass, enum, or protocol; no I/O, no
logging, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol, runtime_checkable


class BumpType(Enum):
    """Semver bump types, ordered by precedence (highest first).

    The "strongest" bump wins across a set of commits. If the set has
    both a ``feat:`` and a ``fix:`` commit, the bump is ``MINOR``.
    """

    MAJOR = 'major'
    MINOR = 'minor'
    PATCH = 'patch'


# Bump precedence: lower index = higher precedence.
BUMP_PRECEDENCE: list[BumpType] = [
    BumpType.MAJOR,
    BumpType.MINOR,
    BumpType.PATCH,
]


def max_bump(a: BumpType | None, b: BumpType | None) -> BumpType | None:
    """Return the higher-precedence bump type (``None`` is the lowest).

    >>> max_bump(BumpType.MINOR, BumpType.PATCH)
    <BumpType.MINOR: 'minor'>
    >>> max_bump(None, BumpType.MAJOR)
    <BumpType.MAJOR: 'major'>
    """
    if a is None:
        return b
    if b is None:
        return a
    return BUMP_PRECEDENCE[min(BUMP_PRECEDENCE.index(a), BUMP_PRECEDENCE.index(b))]


ReferenceType = Literal['issue', 'pull-request']


@dataclass(frozen=True)
class RawCommitEntry:
    """One commit exactly as the git log presents it.

    Attributes:
        hash: The full commit SHA.
        author: ``Name <email>`` of the commit author.
        message: The full raw message: subject, body and footers.
    """

    hash: str
    author: str
    message: str


@dataclass(frozen=True)
class Author:
    """A commit author or co-author."""

    name: str
    email: str = ''


@dataclass(frozen=True)
class Reference:
    """An ``#NNN`` token found in a commit message.

    Attributes:
        type: ``"pull-request"`` when written as ``(#NNN)``, else ``"issue"``.
        value: The token including the ``#`` (e.g. ``"#12"``).
    """

    type: ReferenceType
    value: str

    @property
    def number(self) -> str:
        """The reference number without the ``#``."""
        return self.value.lstrip('#')


@dataclass(frozen=True)
class ConventionalCommit:
    """A parsed commit message.

    Attributes:
        hash: The full commit SHA.
        type: Lower-cased commit type (e.g. ``"feat"``), or ``""`` when the
            subject does not follow the convention.
        scope: Lower-cased scope (e.g. ``"auth"``), or ``""``.
        description: The subject after the ``type(scope)!:`` prefix, with
            pull-request reference groups removed.
        is_breaking: Whether the commit is a breaking change.
        body: Body text without trailers; breaking-change notes are
            appended at the end.
        references: ``#NNN`` tokens in order of appearance.
        authors: Primary author followed by co-authors, unique by email.
    """

    hash: str
    type: str
    description: str
    scope: str = ''
    is_breaking: bool = False
    body: str = ''
    references: tuple[Reference, ...] = ()
    authors: tuple[Author, ...] = ()

    @property
    def short_hash(self) -> str:
        """First 7 characters of the commit SHA."""
        return self.hash[:7]

    @property
    def author(self) -> Author | None:
        """The primary author, if known."""
        return self.authors[0] if self.authors else None


@runtime_checkable
class CommitParser(Protocol):
    """Protocol for commit message parsers.

    Implement this protocol to support commit message formats other than
    `Conventional Commits <https://www.conventionalcommits.org/>`_. A
    parser must be total: malformed input degrades to a record with an
    empty ``type`` instead of raising.
    """

    def parse(self, entry: RawCommitEntry) -> ConventionalCommit:
        """Parse one raw log entry.

        Args:
            entry: The raw commit.

        Returns:
            The parsed record.
        """
        ...
