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

"""Hosting-provider aware link formatting.

The renderer only needs links; it never talks to the provider. A
:class:`RepoConfig` is resolved from whatever the user wrote in the
config (or from ``git remote get-url origin``)::

    github:octo/widgets                    → github.com / octo/widgets
    octo/widgets                           → github.com / octo/widgets
    https://gitlab.com/group/project.git   → gitlab.com / group/project
    git@bitbucket.org:team/repo.git        → bitbucket.org / team/repo

Unknown hosts keep their domain but have no provider, so references are
rendered as plain text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from changelogkit.commit_parsing import Reference

PROVIDER_DOMAINS: dict[str, str] = {
    'github': 'github.com',
    'gitlab': 'gitlab.com',
    'bitbucket': 'bitbucket.org',
}

_DOMAIN_PROVIDERS: dict[str, str] = {domain: provider for provider, domain in PROVIDER_DOMAINS.items()}

# URL path segment per provider and reference kind.
PROVIDER_REF_PATHS: dict[str, dict[str, str]] = {
    'github': {'pull-request': 'pull', 'hash': 'commit', 'issue': 'issues'},
    'gitlab': {'pull-request': 'merge_requests', 'hash': 'commit', 'issue': 'issues'},
    'bitbucket': {'pull-request': 'pull-requests', 'hash': 'commit', 'issue': 'issues'},
}

_SHORTHAND_RE = re.compile(r'^(?:(?P<provider>[a-z]+):)?(?P<repo>[\w.-]+/[\w./-]+)$')
_URL_RE = re.compile(r'^(?:https?|ssh|git)://(?:[^@/]+@)?(?P<domain>[^/:]+)(?::\d+)?/(?P<repo>.+?)(?:\.git)?/?$')
_SCP_RE = re.compile(r'^[^@]+@(?P<domain>[^:]+):(?P<repo>.+?)(?:\.git)?/?$')


@dataclass(frozen=True)
class RepoConfig:
    """Where the repository is hosted.

    Attributes:
        domain: Host name (e.g. ``"github.com"``).
        repo: ``owner/name`` path on the host.
        provider: ``"github"``, ``"gitlab"``, ``"bitbucket"``, or ``""``
            for unknown hosts.
    """

    domain: str
    repo: str
    provider: str = ''

    @property
    def base_url(self) -> str:
        """Web URL of the repository."""
        return f'https://{self.domain}/{self.repo}'


def parse_repo(value: str, *, provider: str = '') -> RepoConfig | None:
    """Resolve a repository shorthand or remote URL.

    Args:
        value: ``provider:owner/name``, ``owner/name``, an HTTPS/SSH URL, or
            an scp-style ``git@host:owner/name.git`` remote.
        provider: Force the provider (for self-hosted GitLab and friends).

    Returns:
        A :class:`RepoConfig`, or ``None`` if ``value`` is not recognized.
    """
    value = value.strip()
    match = _URL_RE.match(value) or _SCP_RE.match(value)
    if match:
        domain = match.group('domain')
        return RepoConfig(
            domain=domain,
            repo=match.group('repo'),
            provider=provider or _DOMAIN_PROVIDERS.get(domain, ''),
        )

    match = _SHORTHAND_RE.match(value)
    if match:
        resolved = provider or match.group('provider') or 'github'
        if resolved not in PROVIDER_DOMAINS:
            return None
        return RepoConfig(
            domain=PROVIDER_DOMAINS[resolved],
            repo=match.group('repo').removesuffix('.git'),
            provider=resolved,
        )
    return None


def _link(repo: RepoConfig | None, kind: str, label: str, target: str) -> str:
    if repo is None or repo.provider not in PROVIDER_REF_PATHS:
        return label
    return f'[{label}]({repo.base_url}/{PROVIDER_REF_PATHS[repo.provider][kind]}/{target})'


def format_reference(ref: Reference, repo: RepoConfig | None) -> str:
    """Render an issue or pull-request reference, linked when possible."""
    return _link(repo, ref.type, ref.value, ref.number)


def format_commit_link(sha: str, repo: RepoConfig | None) -> str:
    """Render a short commit hash, linked to the full commit when possible."""
    return _link(repo, 'hash', sha[:7], sha)


def format_compare_link(from_ref: str, to_ref: str, repo: RepoConfig) -> str:
    """Render a ``[compare changes](...)`` link between two refs."""
    part = 'branches/compare' if repo.provider == 'bitbucket' else 'compare'
    return f'[compare changes]({repo.base_url}/{part}/{from_ref}...{to_ref})'


__all__ = [
    'PROVIDER_DOMAINS',
    'PROVIDER_REF_PATHS',
    'RepoConfig',
    'format_commit_link',
    'format_compare_link',
    'format_reference',
    'parse_repo',
]
