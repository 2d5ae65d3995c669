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

"""Gitmoji normalization for commit subject lines.

Some teams prefix commits with an emoji instead of (or in front of) a
Conventional Commit type. This module rewrites such subjects so the
parser sees a plain header::

    ✨ add OAuth2 login        →  feat: add OAuth2 login
    :bug: null pointer         →  fix: null pointer
    ⬆️ bump requests           →  chore(deps): bump requests
    ✨ feat(auth): add OAuth2  →  feat(auth): add OAuth2
    🦄 add unicorn             →  add unicorn

Pure: depends only on ``re``. No I/O, no logging.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

# Variation selector-16; glyphs are looked up with it removed.
_VS16 = '\ufe0f'

# (glyph, shortcode, header prefix)
_GITMOJI: list[tuple[str, str, str]] = [
    ('✨', 'sparkles', 'feat'),
    ('🎉', 'tada', 'feat'),
    ('💥', 'boom', 'feat!'),
    ('🐛', 'bug', 'fix'),
    ('🚑', 'ambulance', 'fix'),
    ('🩹', 'adhesive_bandage', 'fix'),
    ('🔒', 'lock', 'fix'),
    ('⚡', 'zap', 'perf'),
    ('🐎', 'racehorse', 'perf'),
    ('♻', 'recycle', 'refactor'),
    ('🚚', 'truck', 'refactor'),
    ('🔥', 'fire', 'refactor'),
    ('📝', 'memo', 'docs'),
    ('📚', 'books', 'docs'),
    ('💡', 'bulb', 'docs'),
    ('🎨', 'art', 'style'),
    ('💄', 'lipstick', 'style'),
    ('✅', 'white_check_mark', 'test'),
    ('🧪', 'test_tube', 'test'),
    ('👷', 'construction_worker', 'ci'),
    ('💚', 'green_heart', 'ci'),
    ('📦', 'package', 'build'),
    ('🏗', 'building_construction', 'build'),
    ('🔧', 'wrench', 'chore'),
    ('🔨', 'hammer', 'chore'),
    ('🙈', 'see_no_evil', 'chore'),
    ('🔖', 'bookmark', 'chore(release)'),
    ('⬆', 'arrow_up', 'chore(deps)'),
    ('⬇', 'arrow_down', 'chore(deps)'),
    ('➕', 'heavy_plus_sign', 'chore(deps)'),
    ('➖', 'heavy_minus_sign', 'chore(deps)'),
    ('📌', 'pushpin', 'chore(deps)'),
    ('⏪', 'rewind', 'revert'),
]

GITMOJI_TABLE: dict[str, str] = {}
for _glyph, _shortcode, _prefix in _GITMOJI:
    GITMOJI_TABLE[_glyph] = _prefix
    GITMOJI_TABLE[f':{_shortcode}:'] = _prefix

_EMOJI_CHAR = '[\u2190-\u21ff\u2300-\u23ff\u2460-\u27bf\u2900-\u297f\u2b00-\u2bff\U0001f000-\U0001faff]'
_GLYPH = _EMOJI_CHAR + _VS16 + '?(?:\u200d' + _EMOJI_CHAR + _VS16 + '?)*'
_SHORTCODE = r':[a-z0-9_+-]+:'

LEADING_MARKER_PATTERN: re.Pattern[str] = re.compile(
    rf'^\s*(?P<marker>{_GLYPH}|{_SHORTCODE})\s*',
)

# Loose header check: the remainder already carries a type.
_HAS_HEADER: re.Pattern[str] = re.compile(r'^[a-z]+(?:\([^)]*\))?!?:\s', re.IGNORECASE)


def _lookup(marker: str, extra: Mapping[str, str] | None) -> str | None:
    key = marker.replace(_VS16, '')
    if extra:
        if marker in extra:
            return extra[marker]
        if key in extra:
            return extra[key]
    return GITMOJI_TABLE.get(key)


def normalize_subject(subject: str, extra: Mapping[str, str] | None = None) -> str:
    """Strip or translate leading gitmoji markers in a subject line.

    All leading markers are removed. The first recognized one supplies
    the header prefix unless the remaining text already starts with a
    conventional header.

    Args:
        subject: The commit subject line.
        extra: Additional glyph or ``:shortcode:`` to prefix mappings,
            consulted before the built-in table.

    Returns:
        The normalized subject.
    """
    rest = subject.strip()
    prefix: str | None = None
    while True:
        match = LEADING_MARKER_PATTERN.match(rest)
        if not match:
            break
        if prefix is None:
            prefix = _lookup(match.group('marker'), extra)
        rest = rest[match.end() :]

    if prefix is None or not rest or _HAS_HEADER.match(rest):
        return rest
    return f'{prefix}: {rest}'


__all__ = [
    'GITMOJI_TABLE',
    'LEADING_MARKER_PATTERN',
    'normalize_subject',
]
