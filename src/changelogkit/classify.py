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

"""Type and scope classification of parsed commits.

Classification is a pure, order-preserving filter::

    parsed commits
         │
         ▼
    canonical_scope()      scope_map rewrite ("dependencies" → "deps")
         │
         ▼
    is_included()          type must be configured and enabled
         │
         ▼
    is_dependency_bump()   chore(deps) is noise unless breaking
         │
         ▼
    classified commits
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from changelogkit.commit_parsing import ConventionalCommit
from changelogkit.config import ChangelogConfig


def canonical_scope(commit: ConventionalCommit, config: ChangelogConfig) -> ConventionalCommit:
    """Return ``commit`` with its scope rewritten through ``config.scope_map``."""
    mapped = config.scope_map.get(commit.scope)
    if mapped is None or mapped == commit.scope:
        return commit
    return dataclasses.replace(commit, scope=mapped)


def is_included(commit: ConventionalCommit, config: ChangelogConfig) -> bool:
    """Whether the commit's type is configured and enabled."""
    type_spec = config.types.get(commit.type)
    return type_spec is not None and type_spec.include


def is_dependency_bump(commit: ConventionalCommit) -> bool:
    """Whether the commit is a non-breaking ``chore(deps)`` update."""
    return commit.type == 'chore' and commit.scope == 'deps' and not commit.is_breaking


def classify(commits: Sequence[ConventionalCommit], config: ChangelogConfig) -> list[ConventionalCommit]:
    """Filter and canonicalize commits against the configuration.

    Args:
        commits: Parsed commits, in log order.
        config: Resolved configuration.

    Returns:
        A new list with excluded commits removed and scopes rewritten.
        The input is not modified.
    """
    result: list[ConventionalCommit] = []
    for commit in commits:
        commit = canonical_scope(commit, config)
        if not is_included(commit, config):
            continue
        if is_dependency_bump(commit):
            continue
        result.append(commit)
    return result


__all__ = [
    'canonical_scope',
    'classify',
    'is_dependency_bump',
    'is_included',
]
