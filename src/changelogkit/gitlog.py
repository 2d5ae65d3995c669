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

"""Splitting ``git log`` output into raw commit entries.

Commit bodies contain arbitrary text, so fields and records are delimited
with the ASCII unit (``0x1f``) and record (``0x1e``) separators, which
never appear in a commit message::

    <sha> US <name> <email> US <full message> RS
    <sha> US <name> <email> US <full message> RS
"""

from __future__ import annotations

from changelogkit.commit_parsing import RawCommitEntry

FIELD_SEPARATOR = '\x1f'
RECORD_SEPARATOR = '\x1e'

# Passed to ``git log --pretty=format:``.
LOG_FORMAT = '%H%x1f%an <%ae>%x1f%B%x1e'


def parse_git_log(text: str) -> list[RawCommitEntry]:
    """Parse ``git log --pretty=format:LOG_FORMAT`` output.

    Records with fewer than two fields are skipped. Log order (newest
    first) is preserved.

    Args:
        text: Raw stdout of ``git log``.

    Returns:
        One :class:`RawCommitEntry` per commit.
    """
    entries: list[RawCommitEntry] = []
    for record in text.split(RECORD_SEPARATOR):
        record = record.strip('\n')
        if not record.strip():
            continue
        fields = record.split(FIELD_SEPARATOR, 2)
        if len(fields) < 2:
            continue
        sha, author = fields[0].strip(), fields[1].strip()
        message = fields[2].strip() if len(fields) > 2 else ''
        entries.append(RawCommitEntry(hash=sha, author=author, message=message))
    return entries


__all__ = [
    'FIELD_SEPARATOR',
    'LOG_FORMAT',
    'RECORD_SEPARATOR',
    'parse_git_log',
]
