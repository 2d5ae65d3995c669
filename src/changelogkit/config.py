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

"""Configuration for changelogkit.

The pipeline consumes one resolved, read-only :class:`ChangelogConfig`.
It can be built in code, or loaded from ``changelogkit.toml`` (flat
top-level keys) or the ``[tool.changelogkit]`` table of
``pyproject.toml``.

Key Concepts (ELI5)::

    ┌─────────────────────────┬────────────────────────────────────────────┐
    │ Concept                 │ ELI5 Explanation                           │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ TypeSpec                │ How one commit type is shown: its section  │
    │                         │ title, its version impact, and whether it  │
    │                         │ is included at all.                        │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ ChangelogConfig         │ The whole control panel. Frozen, so the    │
    │                         │ pipeline can never change it mid-run.      │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ validate_config()       │ Checks the panel before any commit is      │
    │                         │ parsed. Bad config fails loudly and early. │
    └─────────────────────────┴────────────────────────────────────────────┘

Supported keys::

    current_version = "1.2.3"             # else [project].version
    repo            = "github:owner/name"  # or a URL / git remote
    provider        = "gitlab"             # force provider for self-hosting
    output          = "CHANGELOG.md"
    from            = "v1.2.3"             # default: latest tag
    to              = "HEAD"               # default: current ref
    exclude_authors = ["bot@example.com"]
    show_authors    = false                # append "by @name" to lines
    contributors    = false                # trailing contributors section
    heading_level   = 2                    # 3 for dev/unreleased headings
    tag_prefix      = "v"

    [types]
    feat  = { title = "Features", semver = "minor" }
    chore = false                          # drop chores entirely
    wip   = { title = "Work in progress" } # new type, no version impact

    [scope_map]
    dependencies = "deps"

    [gitmoji]
    "🦄" = "feat"
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from changelogkit.commit_parsing import BumpType
from changelogkit.errors import E, ChangelogKitError
from changelogkit.logging import get_logger
from changelogkit.repo import PROVIDER_DOMAINS, RepoConfig, parse_repo
from changelogkit.versioning import parse_version

logger = get_logger(__name__)

CONFIG_FILENAME = 'changelogkit.toml'
PYPROJECT_FILENAME = 'pyproject.toml'

VALID_KEYS: frozenset[str] = frozenset({
    'contributors',
    'current_version',
    'exclude_authors',
    'from',
    'gitmoji',
    'heading_level',
    'output',
    'provider',
    'repo',
    'scope_map',
    'show_authors',
    'tag_prefix',
    'to',
    'types',
})

VALID_TYPE_KEYS: frozenset[str] = frozenset({'title', 'semver', 'include'})

ALLOWED_HEADING_LEVELS: frozenset[int] = frozenset({2, 3})

_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'contributors': bool,
    'current_version': str,
    'exclude_authors': list,
    'from': str,
    'gitmoji': dict,
    'heading_level': int,
    'output': str,
    'provider': str,
    'repo': str,
    'scope_map': dict,
    'show_authors': bool,
    'tag_prefix': str,
    'to': str,
    'types': dict,
}


@dataclass(frozen=True)
class TypeSpec:
    """Display and version rules for one commit type.

    Attributes:
        title: Section heading (e.g. ``"Features"``).
        semver: Version impact absent a breaking marker, or ``None``.
        include: Whether commits of this type survive classification.
    """

    title: str
    semver: BumpType | None = None
    include: bool = True


def default_types() -> dict[str, TypeSpec]:
    """Return a fresh copy of the built-in type table (display order)."""
    return {
        'feat': TypeSpec('Features', BumpType.MINOR),
        'fix': TypeSpec('Bug Fixes', BumpType.PATCH),
        'perf': TypeSpec('Performance', BumpType.PATCH),
        'refactor': TypeSpec('Refactoring', BumpType.PATCH),
        'docs': TypeSpec('Documentation', BumpType.PATCH),
        'style': TypeSpec('Style'),
        'test': TypeSpec('Tests'),
        'build': TypeSpec('Build', BumpType.PATCH),
        'ci': TypeSpec('CI/CD'),
        'chore': TypeSpec('Chores'),
        'revert': TypeSpec('Reverts', BumpType.PATCH),
    }


@dataclass(frozen=True)
class ChangelogConfig:
    """Resolved configuration consumed by the pipeline.

    Attributes:
        types: Commit type table; insertion order is section order.
        scope_map: Raw scope to canonical scope. Loaded keys and values are
            lower-cased to match parsed scopes.
        exclude_authors: Names or emails never attributed.
        current_version: Version the bump is applied to.
        repo: Hosting info for links, or ``None`` for plain text.
        show_authors: Append ``by @name`` to commit lines.
        contributors: Emit a trailing contributors section.
        heading_level: 2 for ``##`` release headings, 3 for ``###``.
        tag_prefix: Prefix turning a version into a tag for compare links.
        from_ref: Start of the git range (exclusive).
        to_ref: End of the git range.
        output: Changelog file path, relative to the repository root.
        gitmoji: Extra emoji to header-prefix translations.
        config_path: File the config was loaded from, if any.
        version_path: File that holds ``current_version``; ``bump`` writes
            the new version back there. ``None`` for configs built in code.
        version_keys: TOML key path of the version inside ``version_path``.
    """

    types: dict[str, TypeSpec] = field(default_factory=default_types)
    scope_map: dict[str, str] = field(default_factory=dict)
    exclude_authors: frozenset[str] = frozenset()
    current_version: str = '0.0.0'
    repo: RepoConfig | None = None
    show_authors: bool = False
    contributors: bool = False
    heading_level: int = 2
    tag_prefix: str = 'v'
    from_ref: str = ''
    to_ref: str = ''
    output: str = 'CHANGELOG.md'
    gitmoji: dict[str, str] = field(default_factory=dict)
    config_path: Path | None = None
    version_path: Path | None = None
    version_keys: tuple[str, ...] = ()


def validate_config(config: ChangelogConfig) -> ChangelogConfig:
    """Fail fast on configuration that would produce wrong output.

    Args:
        config: The configuration to check.

    Returns:
        The same configuration, for chaining.

    Raises:
        ChangelogKitError: If the type table is empty or malformed, the
            heading level is unsupported, or the current version is not
            a semantic version.
    """
    if not config.types:
        raise ChangelogKitError(
            code=E.CONFIG_MISSING_REQUIRED,
            message='No commit types are configured',
            hint='Declare at least one type, e.g. [types] feat = { title = "Features", semver = "minor" }.',
        )
    for key, type_spec in config.types.items():
        if not isinstance(type_spec, TypeSpec):
            raise ChangelogKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f"types.{key} must be a TypeSpec, got {type(type_spec).__name__}",
            )
        if not type_spec.title:
            raise ChangelogKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'types.{key} has an empty title',
                hint='Every type needs a section title.',
            )
    if config.heading_level not in ALLOWED_HEADING_LEVELS:
        raise ChangelogKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'heading_level must be one of {sorted(ALLOWED_HEADING_LEVELS)}, got {config.heading_level}',
            hint='Use 2 for release headings (##) or 3 for dev headings (###).',
        )
    parse_version(config.current_version)
    return config


def _invalid(message: str, hint: str = '') -> ChangelogKitError:
    return ChangelogKitError(code=E.CONFIG_INVALID_VALUE, message=message, hint=hint)


def _check_keys(raw: dict[str, Any], context: str) -> None:
    for key in raw:
        if key not in VALID_KEYS:
            suggestion = difflib.get_close_matches(key, VALID_KEYS, n=1, cutoff=0.6)
            raise ChangelogKitError(
                code=E.CONFIG_INVALID_KEY,
                message=f"Unknown key '{key}' in {context}",
                hint=f"Did you mean '{suggestion[0]}'?" if suggestion else f'Valid keys: {sorted(VALID_KEYS)}',
            )
    for key, value in raw.items():
        expected = _TYPE_MAP[key]
        # bool is an int subclass; heading_level = true is still wrong.
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            type_name = expected.__name__ if isinstance(expected, type) else str(expected)
            raise _invalid(
                f"'{key}' must be {type_name}, got {type(value).__name__}",
                hint=f'Check the value of {key} in {context}.',
            )


def _parse_semver(key: str, value: object) -> BumpType | None:
    if value in (None, '', 'none'):
        return None
    try:
        return BumpType(value)
    except ValueError as exc:
        raise _invalid(
            f"types.{key}.semver must be 'major', 'minor' or 'patch', got {value!r}",
        ) from exc


def _parse_types(raw: dict[str, Any]) -> dict[str, TypeSpec]:
    """Merge a ``[types]`` table over the built-in defaults."""
    types = default_types()
    for key, value in raw.items():
        base = types.get(key)
        if isinstance(value, bool):
            if base is None:
                types[key] = TypeSpec(title=key.capitalize(), include=value)
            else:
                types[key] = TypeSpec(title=base.title, semver=base.semver, include=value)
            continue
        if not isinstance(value, dict):
            raise _invalid(
                f'types.{key} must be a table or a boolean, got {type(value).__name__}',
                hint=f'Example: {key} = {{ title = "{key.capitalize()}", semver = "patch" }}',
            )
        unknown = set(value) - VALID_TYPE_KEYS
        if unknown:
            raise ChangelogKitError(
                code=E.CONFIG_INVALID_KEY,
                message=f'Unknown key(s) {sorted(unknown)} in types.{key}',
                hint=f'Valid keys: {sorted(VALID_TYPE_KEYS)}',
            )
        title = value.get('title', base.title if base else key.capitalize())
        if not isinstance(title, str) or not title:
            raise _invalid(f'types.{key}.title must be a non-empty string')
        semver = _parse_semver(key, value['semver']) if 'semver' in value else (base.semver if base else None)
        include = value.get('include', True)
        if not isinstance(include, bool):
            raise _invalid(f'types.{key}.include must be bool, got {type(include).__name__}')
        types[key] = TypeSpec(title=title, semver=semver, include=include)
    return types


def _string_table(key: str, raw: dict[str, Any]) -> dict[str, str]:
    for k, v in raw.items():
        if not isinstance(v, str):
            raise _invalid(f"'{key}.{k}' must be a string, got {type(v).__name__}")
    return dict(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ChangelogKitError(code=E.CONFIG_PARSE_ERROR, message=f'Failed to read {path}: {exc}') from exc
    try:
        return tomlkit.parse(text).unwrap()
    except tomlkit.exceptions.TOMLKitError as exc:
        raise ChangelogKitError(code=E.CONFIG_PARSE_ERROR, message=f'Failed to parse {path}: {exc}') from exc


def _locate(root: Path) -> tuple[dict[str, Any], Path | None, str]:
    """Return the raw settings, their source file, and the project version."""
    pyproject: dict[str, Any] = {}
    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.is_file():
        pyproject = _read_toml(pyproject_path)
    project_version = str(pyproject.get('project', {}).get('version', ''))

    config_path = root / CONFIG_FILENAME
    if config_path.is_file():
        return _read_toml(config_path), config_path, project_version

    section = pyproject.get('tool', {}).get('changelogkit')
    if section is not None:
        if not isinstance(section, dict):
            raise _invalid('[tool.changelogkit] must be a table')
        return section, pyproject_path, project_version

    logger.debug('no_changelogkit_config', root=str(root))
    return {}, None, project_version


def _version_source(
    root: Path,
    raw: dict[str, Any],
    config_path: Path | None,
    project_version: str,
) -> tuple[Path, tuple[str, ...]]:
    """Return the file and TOML key path that ``current_version`` comes from."""
    if project_version and not raw.get('current_version'):
        return root / PYPROJECT_FILENAME, ('project', 'version')
    if config_path is None or config_path.name == CONFIG_FILENAME:
        return root / CONFIG_FILENAME, ('current_version',)
    return config_path, ('tool', 'changelogkit', 'current_version')


def load_config(root: Path, **overrides: Any) -> ChangelogConfig:
    """Load and validate configuration for a repository.

    Looks for ``changelogkit.toml`` first, then ``[tool.changelogkit]`` in
    ``pyproject.toml``. ``current_version`` falls back to
    ``[project].version``. Keyword overrides with a value other than
    ``None`` replace file settings (they use the TOML key names, with
    ``from_ref`` / ``to_ref`` for the range).

    Args:
        root: Repository root directory.
        **overrides: Settings that take precedence over the file.

    Returns:
        A validated :class:`ChangelogConfig`.

    Raises:
        ChangelogKitError: If the file cannot be parsed or contains an
            invalid key or value.
    """
    raw, config_path, project_version = _locate(root)
    context = config_path.name if config_path else 'configuration'
    _check_keys(raw, context)
    version_path, version_keys = _version_source(root, raw, config_path, project_version)

    aliases = {'from_ref': 'from', 'to_ref': 'to'}
    for key, value in overrides.items():
        if value is not None:
            raw[aliases.get(key, key)] = value
    _check_keys(raw, context)

    repo: RepoConfig | None = None
    provider = raw.get('provider', '')
    if provider and provider not in PROVIDER_DOMAINS:
        raise _invalid(
            f'provider must be one of {sorted(PROVIDER_DOMAINS)}, got {provider!r}',
        )
    if raw.get('repo'):
        repo = parse_repo(raw['repo'], provider=provider)
        if repo is None:
            raise _invalid(
                f"repo {raw['repo']!r} is not a recognized repository",
                hint="Use 'owner/name', 'github:owner/name' or a remote URL.",
            )

    exclude_authors = raw.get('exclude_authors', [])
    for item in exclude_authors:
        if not isinstance(item, str):
            raise _invalid(f"'exclude_authors' items must be strings, got {type(item).__name__}")

    config = ChangelogConfig(
        types=_parse_types(raw.get('types', {})),
        scope_map={
            k.lower(): v.lower() for k, v in _string_table('scope_map', raw.get('scope_map', {})).items()
        },
        exclude_authors=frozenset(exclude_authors),
        current_version=raw.get('current_version') or project_version or '0.0.0',
        repo=repo,
        show_authors=raw.get('show_authors', False),
        contributors=raw.get('contributors', False),
        heading_level=raw.get('heading_level', 2),
        tag_prefix=raw.get('tag_prefix', 'v'),
        from_ref=raw.get('from', ''),
        to_ref=raw.get('to', ''),
        output=raw.get('output', 'CHANGELOG.md'),
        gitmoji=_string_table('gitmoji', raw.get('gitmoji', {})),
        config_path=config_path,
        version_path=version_path,
        version_keys=version_keys,
    )
    logger.debug('config_loaded', path=str(config_path) if config_path else None, types=len(config.types))
    return validate_config(config)


def rewrite_version(config: ChangelogConfig, new_version: str, *, dry_run: bool = False) -> bool:
    """Write a released version back to the file ``current_version`` came from.

    Uses tomlkit so comments, formatting and key order survive. A missing
    ``changelogkit.toml`` is created.

    Args:
        config: Configuration from :func:`load_config`.
        new_version: The version just released.
        dry_run: Log the write without performing it.

    Returns:
        True if the file was written (or would be in dry-run), False if
        the configuration has no version file (it was built in code).

    Raises:
        ChangelogKitError: If the file cannot be parsed or written.
    """
    path = config.version_path
    if path is None or not config.version_keys:
        logger.debug('version_not_persisted', new_version=new_version)
        return False

    key_path = '.'.join(config.version_keys)
    if dry_run:
        logger.info('version_write_dry_run', path=str(path), key=key_path, new=new_version)
        return True

    try:
        doc = tomlkit.parse(path.read_text(encoding='utf-8')) if path.exists() else tomlkit.document()
    except (OSError, tomlkit.exceptions.TOMLKitError) as exc:
        raise ChangelogKitError(
            code=E.VERSION_WRITE_FAILED,
            message=f'Failed to read {path}: {exc}',
        ) from exc

    *tables, key = config.version_keys
    table: Any = doc
    for name in tables:
        table = table.setdefault(name, tomlkit.table())
    old_version = table.get(key)
    table[key] = new_version

    try:
        path.write_text(tomlkit.dumps(doc), encoding='utf-8')
    except OSError as exc:
        raise ChangelogKitError(
            code=E.VERSION_WRITE_FAILED,
            message=f'Failed to write {path}: {exc}',
        ) from exc
    logger.info(
        'version_written',
        path=str(path),
        key=key_path,
        old=str(old_version) if old_version is not None else None,
        new=new_version,
    )
    return True


__all__ = [
    'ALLOWED_HEADING_LEVELS',
    'CONFIG_FILENAME',
    'VALID_KEYS',
    'ChangelogConfig',
    'TypeSpec',
    'default_types',
    'load_config',
    'rewrite_version',
    'validate_config',
]
