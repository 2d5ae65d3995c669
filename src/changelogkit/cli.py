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

"""CLI entry point for changelogkit.

Constructs the git backend and drives the pipeline through
:mod:`changelogkit.api`.

Subcommands::

    changelogkit generate   Print the changelog for a commit range
    changelogkit bump       Compute the next version and update CHANGELOG.md
    changelogkit explain    Explain an error code

Usage::

    # Preview unreleased changes since the last tag:
    changelogkit generate

    # Splice them into CHANGELOG.md:
    changelogkit generate --output

    # Release: update CHANGELOG.md and current_version, print the new version:
    changelogkit bump
    changelogkit bump --minor
    changelogkit bump -r 2.0.0

    # Explain an error:
    changelogkit explain CK-VERSION-NOT-BUMPED

Markdown and version numbers go to stdout; logs and errors to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich_argparse import RichHelpFormatter

from changelogkit import __version__
from changelogkit.api import changelog_from_git
from changelogkit.backends import GitCLIBackend
from changelogkit.changelog import write_changelog
from changelogkit.commit_parsing import BumpType
from changelogkit.config import ChangelogConfig, load_config, rewrite_version
from changelogkit.errors import E, ChangelogKitError, explain, render_error
from changelogkit.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _load(args: argparse.Namespace) -> tuple[Path, ChangelogConfig]:
    root = Path(args.dir).resolve()
    config = load_config(root, from_ref=args.from_ref, to_ref=args.to_ref)
    return root, config


def _output_path(root: Path, config: ChangelogConfig, output: str) -> Path:
    path = Path(output or config.output)
    return path if path.is_absolute() else root / path


def _override(args: argparse.Namespace) -> BumpType | None:
    if args.major:
        return BumpType.MAJOR
    if args.minor:
        return BumpType.MINOR
    if args.patch:
        return BumpType.PATCH
    return None


async def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the ``generate`` subcommand.

    Prints the rendered markdown. With ``--output`` the block is also
    spliced into the changelog file.
    """
    root, config = _load(args)
    result = await changelog_from_git(GitCLIBackend(root), config, bump=args.bump)

    print(result.markdown, end='')  # noqa: T201 - CLI output

    if args.output is not None:
        write_changelog(_output_path(root, config, args.output), result.markdown, dry_run=args.dry_run)
    return 0


async def _cmd_bump(args: argparse.Namespace) -> int:
    """Handle the ``bump`` subcommand.

    Computes the next version, splices the release section into the
    changelog file, records the version as ``current_version`` and
    prints it.
    """
    root, config = _load(args)
    result = await changelog_from_git(
        GitCLIBackend(root),
        config,
        bump=True,
        override=_override(args),
        new_version=args.new_version,
    )

    if result.new_version is None:
        since = result.config.from_ref if result.config else ''
        raise ChangelogKitError(
            code=E.VERSION_NOT_BUMPED,
            message=f'Unable to bump version: no commit since {since or "the first commit"} implies a release',
            hint='Pass --major, --minor or --patch to force a bump, or -r to set the version explicitly.',
        )

    if not args.no_write:
        write_changelog(_output_path(root, config, args.output or ''), result.markdown, dry_run=args.dry_run)
        rewrite_version(config, result.new_version, dry_run=args.dry_run)

    print(result.new_version)  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='changelogkit',
        description='Changelogs and semver bumps from Conventional Commits.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--dir',
        default='.',
        metavar='PATH',
        help='Repository root (default: current directory).',
    )
    parser.add_argument(
        '--from',
        dest='from_ref',
        default=None,
        metavar='REF',
        help='Start of the commit range, exclusive (default: latest tag).',
    )
    parser.add_argument(
        '--to',
        dest='to_ref',
        default=None,
        metavar='REF',
        help='End of the commit range (default: current branch).',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log one JSON object per line.')

    subparsers = parser.add_subparsers(dest='command')

    generate_parser = subparsers.add_parser(
        'generate',
        help='Print the changelog for a commit range.',
        formatter_class=RichHelpFormatter,
    )
    generate_parser.add_argument(
        '--output',
        '-o',
        nargs='?',
        const='',
        default=None,
        metavar='FILE',
        help='Also splice the result into FILE (default: the configured output, CHANGELOG.md).',
    )
    generate_parser.add_argument(
        '--bump',
        action='store_true',
        help='Head the section with the computed next version instead of "Unreleased".',
    )
    generate_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Log the file write without performing it.',
    )

    bump_parser = subparsers.add_parser(
        'bump',
        help='Compute the next version and update the changelog and version files.',
        formatter_class=RichHelpFormatter,
    )
    forced = bump_parser.add_mutually_exclusive_group()
    forced.add_argument('--major', action='store_true', help='Force a major bump.')
    forced.add_argument('--minor', action='store_true', help='Force a minor bump.')
    forced.add_argument('--patch', action='store_true', help='Force a patch bump.')
    forced.add_argument(
        '--new-version',
        '-r',
        default=None,
        metavar='VERSION',
        help='Use VERSION as the new version.',
    )
    bump_parser.add_argument(
        '--output',
        '-o',
        default=None,
        metavar='FILE',
        help='Changelog file to update (default: the configured output, CHANGELOG.md).',
    )
    bump_parser.add_argument(
        '--no-write',
        action='store_true',
        help='Only print the new version; leave the changelog and version files alone.',
    )
    bump_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Log the file writes without performing them.',
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
    )
    explain_parser.add_argument('code', help='Error code, e.g. CK-VERSION-INVALID.')

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        command = args.command
        if command == 'generate':
            return asyncio.run(_cmd_generate(args))
        if command == 'bump':
            return asyncio.run(_cmd_bump(args))
        if command == 'explain':
            return _cmd_explain(args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except ChangelogKitError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
