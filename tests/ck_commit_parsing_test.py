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

"""Tests for changelogkit.commit_parsing."""

from __future__ import annotations

import dataclasses

import pytest
from changelogkit.commit_parsing import (
    Author,
    BumpType,
    CommitParser,
    ConventionalCommitParser,
    RawCommitEntry,
    Reference,
    max_bump,
    parse_commit,
    parse_commits,
)
from changelogkit.config import ChangelogConfig

_ADA = 'Ada Lovelace <ada@example.com>'


def _entry(message: str, sha: str = 'a1b2c3d4e5f60718293a4b5c6d7e8f9012345678', author: str = _ADA) -> RawCommitEntry:
    return RawCommitEntry(hash=sha, author=author, message=message)


class TestMaxBump:
    """Tests for max_bump()."""

    def test_none_is_lowest(self) -> None:
        """None loses against any bump."""
        assert max_bump(None, BumpType.PATCH) == BumpType.PATCH
        assert max_bump(BumpType.PATCH, None) == BumpType.PATCH
        assert max_bump(None, None) is None

    def test_precedence(self) -> None:
        """MAJOR beats MINOR beats PATCH."""
        assert max_bump(BumpType.MINOR, BumpType.PATCH) == BumpType.MINOR
        assert max_bump(BumpType.MINOR, BumpType.MAJOR) == BumpType.MAJOR


class TestHeader:
    """Tests for subject header parsing."""

    def test_type_scope_description(self) -> None:
        """A full header is split into its parts."""
        cc = parse_commit(_entry('feat(auth): add OAuth2 login'))
        assert cc.type == 'feat'
        assert cc.scope == 'auth'
        assert cc.description == 'add OAuth2 login'
        assert cc.is_breaking is False

    def test_type_and_scope_lower_cased(self) -> None:
        """Type and scope are stored lower-case; description is kept."""
        cc = parse_commit(_entry('Feat(API): Add Foo'))
        assert cc.type == 'feat'
        assert cc.scope == 'api'
        assert cc.description == 'Add Foo'

    def test_no_scope(self) -> None:
        """A missing scope is the empty string."""
        cc = parse_commit(_entry('fix: handle empty input'))
        assert cc.type == 'fix'
        assert cc.scope == ''

    def test_bang_marks_breaking(self) -> None:
        """``!`` before the colon marks a breaking change."""
        cc = parse_commit(_entry('refactor(core)!: drop legacy mode'))
        assert cc.is_breaking is True
        assert cc.type == 'refactor'

    def test_pull_request_group_removed_from_description(self) -> None:
        """``(#12)`` is dropped from the description and kept as a reference."""
        cc = parse_commit(_entry('feat(api): add foo (#12)'))
        assert cc.description == 'add foo'
        assert cc.references == (Reference(type='pull-request', value='#12'),)

    def test_bare_issue_kept_in_description(self) -> None:
        """A bare ``#7`` stays in the description and is an issue."""
        cc = parse_commit(_entry('fix: crash, closes #7'))
        assert cc.description == 'crash, closes #7'
        assert cc.references == (Reference(type='issue', value='#7'),)

    def test_non_conventional_subject(self) -> None:
        """A subject without a header yields an empty type."""
        cc = parse_commit(_entry('Update README'))
        assert cc.type == ''
        assert cc.scope == ''
        assert cc.description == 'Update README'

    def test_missing_space_after_colon(self) -> None:
        """``feat:foo`` is not a conventional header."""
        cc = parse_commit(_entry('feat:foo'))
        assert cc.type == ''
        assert cc.description == 'feat:foo'

    def test_gitmoji_subject(self) -> None:
        """A leading gitmoji is translated before matching."""
        cc = parse_commit(_entry('\U0001f41b null pointer in parser'))
        assert cc.type == 'fix'
        assert cc.description == 'null pointer in parser'

    def test_config_gitmoji_extends_table(self) -> None:
        """Extra gitmoji from the config are honored."""
        config = ChangelogConfig(gitmoji={':unicorn:': 'feat'})
        cc = parse_commit(_entry(':unicorn: magic'), config)
        assert cc.type == 'feat'
        assert cc.description == 'magic'


class TestBody:
    """Tests for body, breaking footer and trailer handling."""

    def test_breaking_footer(self) -> None:
        """A ``BREAKING CHANGE:`` footer marks the commit and keeps the note."""
        cc = parse_commit(_entry('feat: new config\n\nDetails here.\n\nBREAKING CHANGE: old keys removed'))
        assert cc.is_breaking is True
        assert cc.body == 'Details here.\nold keys removed'

    def test_breaking_hyphen_form(self) -> None:
        """``BREAKING-CHANGE:`` is accepted too."""
        cc = parse_commit(_entry('fix: x\n\nBREAKING-CHANGE: y'))
        assert cc.is_breaking is True
        assert cc.body == 'y'

    def test_breaking_keyword_case_sensitive(self) -> None:
        """A lower-case ``breaking change:`` line is ordinary body text."""
        cc = parse_commit(_entry('fix: x\n\nbreaking change: maybe'))
        assert cc.is_breaking is False
        assert cc.body == 'breaking change: maybe'

    def test_primary_author(self) -> None:
        """The entry author becomes the first author."""
        cc = parse_commit(_entry('fix: x'))
        assert cc.author == Author(name='Ada Lovelace', email='ada@example.com')

    def test_co_authors(self) -> None:
        """Co-author trailers are collected and removed from the body."""
        message = 'feat: pair work\n\nCo-authored-by: Bob <bob@example.com>\nco-authored-by: Carol'
        cc = parse_commit(_entry(message))
        assert cc.authors == (
            Author('Ada Lovelace', 'ada@example.com'),
            Author('Bob', 'bob@example.com'),
            Author('Carol', ''),
        )
        assert cc.body == ''

    def test_co_author_same_email_deduplicated(self) -> None:
        """A co-author with the primary author's email is not repeated."""
        cc = parse_commit(_entry('fix: x\n\nCo-authored-by: Ada L. <ADA@example.com>'))
        assert cc.authors == (Author('Ada Lovelace', 'ada@example.com'),)

    def test_references_from_body(self) -> None:
        """Body tokens are collected after subject tokens."""
        cc = parse_commit(_entry('fix: leak (#40)\n\nRefs #3 and #5'))
        assert [r.value for r in cc.references] == ['#40', '#3', '#5']
        assert [r.type for r in cc.references] == ['pull-request', 'issue', 'issue']


class TestTotality:
    """The parser never raises."""

    @pytest.mark.parametrize(
        'message',
        [
            '',
            '\n\n',
            ':',
            '()!: ',
            'feat(: broken',
            'Co-authored-by:',
            'Co-authored-by: <>',
            'BREAKING CHANGE:',
            '#',
            '(#)',
            '\x00\x1f weird',
            '\U0001f984',
        ],
    )
    def test_malformed_input(self, message: str) -> None:
        """Malformed input yields a record instead of an exception."""
        cc = parse_commit(_entry(message, author=''))
        assert cc.hash


class TestParser:
    """Tests for the parser object and batch parsing."""

    def test_implements_protocol(self) -> None:
        """ConventionalCommitParser satisfies CommitParser."""
        assert isinstance(ConventionalCommitParser(), CommitParser)

    def test_parse_commits_preserves_order(self) -> None:
        """Batch parsing keeps log order."""
        entries = [_entry('feat: a', sha='1' * 40), _entry('fix: b', sha='2' * 40)]
        assert [c.description for c in parse_commits(entries)] == ['a', 'b']

    def test_deterministic(self) -> None:
        """Parsing the same entry twice gives equal records."""
        entry = _entry('feat(x)!: y (#1)\n\nBREAKING CHANGE: z\nCo-authored-by: B <b@x.io>')
        assert parse_commit(entry) == parse_commit(entry)

    def test_records_are_frozen(self) -> None:
        """Parsed records cannot be mutated."""
        cc = parse_commit(_entry('fix: x'))
        with pytest.raises(dataclasses.FrozenInstanceError):
            cc.type = 'feat'  # type: ignore[misc]

    def test_short_hash(self) -> None:
        """short_hash is the first seven characters."""
        assert parse_commit(_entry('fix: x')).short_hash == 'a1b2c3d'
