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

"""Line and token matchers for commit bodies and footers.

Each matcher has one job so it can be tested on its own:

- :func:`breaking_note`: ``BREAKING CHANGE:`` footer lines.
- :func:`find_references`: ``#123`` issue and pull-request tokens.
- :func:`co_author`: ``Co-authored-by:`` trailers.
- :func:`parse_author` / :func:`unique_authors`: author identities.

All matchers are best effort: malformed input yields partial values,
never an exception.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from changelogkit.commit_parsing._types import Author, Reference

# Case-sensitive keyword; space or hyphen between the two words.
BREAKING_LINE_PATTERN: re.Pattern[str] = re.compile(
    r'^BREAKING(?:[ \t]+|-)CHANGE[ \t]*:[ \t]*(?P<note>.*)$',
)

ISSUE_TOKEN_PATTERN: re.Pattern[str] = re.compile(r'#\d+')

# GitHub squash-merge style: "(#123)", also "(closes #123)".
PULL_REQUEST_PATTERN: re.Pattern[str] = re.compile(
    r'\([ a-z]*(?P<ref>#\d+)\s*\)',
    re.IGNORECASE,
)

CO_AUTHOR_PATTERN: re.Pattern[str] = re.compile(
    r'^co-authored-by:\s*(?P<identity>.*)$',
    re.IGNORECASE,
)

# "Name <email>", tolerating a missing email or closing bracket.
IDENTITY_PATTERN: re.Pattern[str] = re.compile(
    r'^\s*(?P<name>[^<]*?)\s*(?:<(?P<email>[^>]*)>?)?\s*$',
)


def breaking_note(line: str) -> str | None:
    """Return the note of a breaking-change footer line, else ``None``.

    >>> breaking_note('BREAKING CHANGE: drop Python 3.9')
    'drop Python 3.9'
    >>> breaking_note('breaking change: nope') is None
    True
    """
    match = BREAKING_LINE_PATTERN.match(line.rstrip())
    if match is None:
        return None
    return match.group('note').strip()


def find_references(text: str) -> tuple[Reference, ...]:
    """Extract every ``#NNN`` token in order of appearance.

    Tokens inside a pull-request group such as ``(#12)`` are typed
    ``"pull-request"``; all others are ``"issue"``. Repeated tokens are
    kept.
    """
    pr_spans = [m.span('ref') for m in PULL_REQUEST_PATTERN.finditer(text)]
    refs: list[Reference] = []
    for match in ISSUE_TOKEN_PATTERN.finditer(text):
        is_pr = any(start <= match.start() < end for start, end in pr_spans)
        refs.append(Reference(type='pull-request' if is_pr else 'issue', value=match.group()))
    return tuple(refs)


def strip_pull_request_refs(description: str) -> str:
    """Remove ``(#NNN)`` groups from a description."""
    return PULL_REQUEST_PATTERN.sub('', description).strip()


def parse_author(identity: str) -> Author:
    """Split ``Name <email>`` into an :class:`Author`.

    >>> parse_author('Ada Lovelace <ada@example.com>')
    Author(name='Ada Lovelace', email='ada@example.com')
    >>> parse_author('ada')
    Author(name='ada', email='')
    """
    match = IDENTITY_PATTERN.match(identity)
    if match is None:
        return Author(name=identity.strip())
    return Author(name=match.group('name').strip(), email=(match.group('email') or '').strip())


def co_author(line: str) -> Author | None:
    """Return the co-author named by a ``Co-authored-by:`` line, else ``None``."""
    match = CO_AUTHOR_PATTERN.match(line.strip())
    if match is None:
        return None
    author = parse_author(match.group('identity'))
    if not author.name and not author.email:
        return None
    return author


def _identity_key(author: Author) -> str:
    if author.email:
        return author.email.lower()
    return f'name:{author.name.lower()}'


def unique_authors(authors: Iterable[Author]) -> tuple[Author, ...]:
    """De-duplicate authors by email (case-insensitive), keeping the first seen.

    Authors without an email are de-duplicated by name instead.
    """
    seen: set[str] = set()
    result: list[Author] = []
    for author in authors:
        key = _identity_key(author)
        if key in seen:
            continue
        seen.add(key)
        result.append(author)
    return tuple(result)


__all__ = [
    'BREAKING_LINE_PATTERN',
    'CO_AUTHOR_PATTERN',
    'ISSUE_TOKEN_PATTERN',
    'PULL_REQUEST_PATTERN',
    'breaking_note',
    'co_author',
    'find_references',
    'parse_author',
    'strip_pull_request_refs',
    'unique_authors',
]
