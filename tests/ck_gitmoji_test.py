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

"""Tests for changelogkit.gitmoji."""

from __future__ import annotations

import pytest
from changelogkit.gitmoji import GITMOJI_TABLE, normalize_subject


class TestGitmojiTable:
    """Tests for the built-in table."""

    def test_glyph_and_shortcode_agree(self) -> None:
        """Glyph and shortcode map to the same prefix."""
        assert GITMOJI_TABLE['✨'] == GITMOJI_TABLE[':sparkles:'] == 'feat'
        assert GITMOJI_TABLE['\U0001f41b'] == GITMOJI_TABLE[':bug:'] == 'fix'

    def test_boom_is_breaking_feature(self) -> None:
        """The boom emoji maps to a breaking feature."""
        assert GITMOJI_TABLE[':boom:'] == 'feat!'


class TestNormalizeSubject:
    """Tests for normalize_subject()."""

    @pytest.mark.parametrize(
        ('subject', 'expected'),
        [
            ('✨ add OAuth2 login', 'feat: add OAuth2 login'),
            (':bug: null pointer', 'fix: null pointer'),
            ('\u2b06\ufe0f bump requests', 'chore(deps): bump requests'),
            (':arrow_up: bump requests', 'chore(deps): bump requests'),
            ('\U0001f4a5 drop v1 API', 'feat!: drop v1 API'),
        ],
    )
    def test_recognized_marker_becomes_prefix(self, subject: str, expected: str) -> None:
        """A known marker is translated into a header prefix."""
        assert normalize_subject(subject) == expected

    def test_marker_before_existing_header_is_stripped(self) -> None:
        """A subject that already has a header keeps it."""
        assert normalize_subject('✨ feat(auth): add OAuth2') == 'feat(auth): add OAuth2'

    def test_unknown_glyph_is_stripped(self) -> None:
        """An unknown emoji is removed without substitution."""
        assert normalize_subject('\U0001f984 add unicorn') == 'add unicorn'

    def test_unknown_shortcode_is_stripped(self) -> None:
        """An unknown shortcode is removed without substitution."""
        assert normalize_subject(':unicorn: fix: horn') == 'fix: horn'

    def test_multiple_markers_first_known_wins(self) -> None:
        """All leading markers go; the first recognized one is used."""
        assert normalize_subject('\U0001f984 \U0001f41b :sparkles: crash on start') == 'fix: crash on start'

    def test_plain_subject_unchanged(self) -> None:
        """Subjects without a marker are only trimmed."""
        assert normalize_subject('  feat: add foo  ') == 'feat: add foo'

    def test_marker_only(self) -> None:
        """A subject made only of a marker normalizes to empty."""
        assert normalize_subject('✨') == ''

    def test_extra_table_takes_precedence(self) -> None:
        """Entries in ``extra`` override and extend the built-in table."""
        extra = {'\U0001f984': 'feat', ':bug:': 'chore'}
        assert normalize_subject('\U0001f984 add unicorn', extra) == 'feat: add unicorn'
        assert normalize_subject(':bug: tweak', extra) == 'chore: tweak'

    def test_emoji_later_in_subject_untouched(self) -> None:
        """Only leading markers are considered."""
        assert normalize_subject('feat: add ✨ sparkle') == 'feat: add ✨ sparkle'
