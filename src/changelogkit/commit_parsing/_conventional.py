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

"""Conventional Commits parser.

Pure implementation: depends only on ``re``, :mod:`changelogkit.gitmoji`
and the matchers in :mod:`._matchers`. No I/O, no logging, no side effects.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from changelogkit.commit_parsing._matchers import (
    breaking_note,
    co_author,
    find_references,
    parse_author,
    strip_pull_request_refs,
    unique_authors,
)
from changelogkit.commit_parsing._types import Author, ConventionalCommit, RawCommitEntry
from changelogkit.gitmoji import normalize_subject

# Regex for Conventional Commits: type(scope)!: description
CC_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<type>[a-z]*)'  # type (e.g. feat, fix, chore); may be empty
    r'(?:\((?P<scope>[^)]*)\))?'  # optional scope in parens
    r'(?P<breaking>!)?'  # optional breaking change indicator
    r':\s+'  # colon + whitespace
    r'(?P<description>.+)$',  # description
    re.IGNORECASE,
)


class ConventionalCommitParser:
    """Parser for `Conventional Commits <https://www.conventionalcommits.org/>`_.

    Parses the subject as ``type(scope)!: description`` after gitmoji
    normalization, then scans the remaining lines for breaking-change
    footers, ``#NNN`` references and ``Co-authored-by:`` trailers.

    Args:
        gitmoji: Extra glyph or ``:shortcode:`` to header-prefix mappings
            layered over the built-in gitmoji table.
    """

    def __init__(self, gitmoji: Mapping[str, str] | None = None) -> None:
        """Initialize with optional extra gitmoji mappings."""
        self._gitmoji = dict(gitmoji) if gitmoji else None

    def parse(self, entry: RawCommitEntry) -> ConventionalCommit:
        """Parse a raw log entry as a Conventional Commit.

        Never raises: a subject that does not follow the convention yields
        a record with empty ``type`` and ``scope`` and the whole subject as
        ``description``.

        Args:
            entry: The raw commit.

        Returns:
            The parsed :class:`ConventionalCommit`.
        """
        lines = entry.message.splitlines()
        subject = normalize_subject(lines[0] if lines else '', self._gitmoji)
        trailer_lines = lines[1:]

        match = CC_PATTERN.match(subject)
        if match:
            cc_type = match.group('type').lower()
            scope = (match.group('scope') or '').strip().lower()
            breaking = bool(match.group('breaking'))
            description = strip_pull_request_refs(match.group('description'))
        else:
            cc_type = ''
            scope = ''
            breaking = False
            description = subject

        body_lines: list[str] = []
        notes: list[str] = []
        co_authors: list[Author] = []
        for line in trailer_lines:
            note = breaking_note(line)
            if note is not None:
                breaking = True
                if note:
                    notes.append(note)
                continue
            author = co_author(line)
            if author is not None:
                co_authors.append(author)
                continue
            body_lines.append(line.rstrip())

        body = '\n'.join(body_lines).strip()
        if notes:
            body = '\n'.join([body, *notes]) if body else '\n'.join(notes)

        primary = parse_author(entry.author)
        authors = [primary] if primary.name or primary.email else []

        return ConventionalCommit(
            hash=entry.hash,
            type=cc_type,
            scope=scope,
            description=description,
            is_breaking=breaking,
            body=body,
            references=find_references('\n'.join([subject, *trailer_lines])),
            authors=unique_authors([*authors, *co_authors]),
        )
