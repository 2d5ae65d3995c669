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

"""Tests for changelogkit.cli: parser and subcommands.

The git backend is replaced with :class:`FakeVCS`; no real git runs.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from changelogkit.cli import build_parser, main
from tests._fakes import FakeVCS, make_entries


def _project(root: Path, version: str = '1.2.3') -> Path:
    (root / 'changelogkit.toml').write_text(f'current_version = "{version}"\n', encoding='utf-8')
    return root


class TestBuildParser:
    """Tests for the argument parser structure."""

    def test_parser_creation(self) -> None:
        """Parser is created without errors."""
        assert build_parser() is not None

    def test_global_options(self) -> None:
        """Global options come before the subcommand."""
        args = build_parser().parse_args(['--dir', '/x', '--from', 'v1', '--to', 'main', '-v', 'generate'])
        assert args.dir == '/x'
        assert args.from_ref == 'v1'
        assert args.to_ref == 'main'
        assert args.verbose is True
        assert args.command == 'generate'

    def test_generate_output_flag(self) -> None:
        """--output without a value means the configured file."""
        parser = build_parser()
        assert parser.parse_args(['generate']).output is None
        assert parser.parse_args(['generate', '--output']).output == ''
        assert parser.parse_args(['generate', '-o', 'HISTORY.md']).output == 'HISTORY.md'

    def test_bump_flags_exclusive(self) -> None:
        """Only one forced bump may be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(['bump', '--major', '--minor'])

    def test_bump_new_version(self) -> None:
        """-r sets the new version."""
        args = build_parser().parse_args(['bump', '-r', '2.0.0'])
        assert args.new_version == '2.0.0'

    def test_verbose_and_quiet_exclusive(self) -> None:
        """-v and -q cannot be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(['-v', '-q', 'generate'])


class TestMain:
    """Tests for main() dispatch."""

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Without a command, help is shown and the exit code is 2."""
        assert main([]) == 2
        assert 'please provide a command' in capsys.readouterr().err

    def test_explain_known(self, capsys: pytest.CaptureFixture[str]) -> None:
        """explain prints the catalog entry."""
        assert main(['explain', 'CK-VERSION-NOT-BUMPED']) == 0
        assert 'CK-VERSION-NOT-BUMPED' in capsys.readouterr().out

    def test_explain_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        """explain returns 1 for unknown codes."""
        assert main(['explain', 'CK-NOPE']) == 1
        assert 'Unknown error code' in capsys.readouterr().out


class TestGenerate:
    """Tests for the generate subcommand."""

    def test_prints_markdown(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The changelog goes to stdout; no file is written."""
        vcs = FakeVCS(make_entries('feat: add foo', 'fix: bar'), tag='v1.2.3')
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path)), 'generate']) == 0
        out = capsys.readouterr().out
        assert out.startswith('## Unreleased\n')
        assert '- add foo (0000001)' in out
        assert not (tmp_path / 'CHANGELOG.md').exists()

    def test_output_writes_file(self, tmp_path: Path) -> None:
        """--output splices into the configured changelog."""
        vcs = FakeVCS(make_entries('feat: add foo'))
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path)), 'generate', '--bump', '--output']) == 0
        text = (tmp_path / 'CHANGELOG.md').read_text(encoding='utf-8')
        assert text.startswith('# Changelog\n\n## 1.3.0\n')

    def test_output_refreshes_unreleased(self, tmp_path: Path) -> None:
        """A later --output run with new commits updates the Unreleased block."""
        root = _project(tmp_path)
        with patch('changelogkit.cli.GitCLIBackend', return_value=FakeVCS(make_entries('feat: first'))):
            assert main(['-q', '--dir', str(root), 'generate', '--output']) == 0
        vcs = FakeVCS(make_entries('feat: first', 'fix: newer'))
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(root), 'generate', '--output']) == 0
        text = (root / 'CHANGELOG.md').read_text(encoding='utf-8')
        assert text.count('## Unreleased') == 1
        assert '- first (0000001)' in text
        assert '- newer (0000002)' in text

    def test_from_flag_passed_to_git(self, tmp_path: Path) -> None:
        """--from overrides the latest tag."""
        vcs = FakeVCS(tag='v1.2.3')
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            main(['-q', '--dir', str(_project(tmp_path)), '--from', 'v1.0.0', 'generate'])
        assert vcs.log_calls == [('v1.0.0', 'main')]


class TestBump:
    """Tests for the bump subcommand."""

    def test_prints_version_and_writes(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The new version is printed and the changelog updated."""
        vcs = FakeVCS(make_entries('feat(api): add foo (#12)', 'fix: bar'), tag='v1.2.3')
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path)), 'bump']) == 0
        assert capsys.readouterr().out == '1.3.0\n'
        text = (tmp_path / 'CHANGELOG.md').read_text(encoding='utf-8')
        assert '## 1.3.0' in text
        assert '- **api:** add foo (0000001, #12)' in text

    def test_forced_major(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--major forces a major bump."""
        vcs = FakeVCS(make_entries('fix: bar'))
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path, '0.4.2')), 'bump', '--major']) == 0
        assert capsys.readouterr().out == '1.0.0\n'

    def test_explicit_version_no_write(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """-r with --no-write only prints the version."""
        vcs = FakeVCS(make_entries('fix: bar'))
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path)), 'bump', '-r', '5.0.0', '--no-write']) == 0
        assert capsys.readouterr().out == '5.0.0\n'
        assert not (tmp_path / 'CHANGELOG.md').exists()
        assert (tmp_path / 'changelogkit.toml').read_text(encoding='utf-8') == 'current_version = "1.2.3"\n'

    def test_nothing_to_bump(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """No bump-worthy commit exits 1 with CK-VERSION-NOT-BUMPED."""
        vcs = FakeVCS(make_entries('chore(deps): bump lodash'), tag='v1.2.3')
        with patch('changelogkit.cli.GitCLIBackend', return_value=vcs):
            assert main(['-q', '--dir', str(_project(tmp_path)), 'bump']) == 1
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'CK-VERSION-NOT-BUMPED' in captured.err
        assert 'Unable to bump version' in captured.err
        assert not (tmp_path / 'CHANGELOG.md').exists()

    def test_invalid_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A bad config is rendered as an error with exit code 1."""
        (tmp_path / 'changelogkit.toml').write_text('curent_version = "1.0.0"\n', encoding='utf-8')
        assert main(['-q', '--dir', str(tmp_path), 'bump']) == 1
        err = capsys.readouterr().err
        assert 'CK-CONFIG-INVALID-KEY' in err
        assert "Did you mean 'current_version'?" in err

    def test_second_bump_starts_from_released_version(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A bump records the new version, so the next bump moves past it."""
        root = _project(tmp_path)
        with patch('changelogkit.cli.GitCLIBackend', return_value=FakeVCS(make_entries('feat: first'))):
            assert main(['-q', '--dir', str(root), 'bump']) == 0
        second = FakeVCS(make_entries('feat: second'), tag='v1.3.0')
        with patch('changelogkit.cli.GitCLIBackend', return_value=second):
            assert main(['-q', '--dir', str(root), 'bump']) == 0
        assert capsys.readouterr().out == '1.3.0\n1.4.0\n'
        assert 'current_version = "1.4.0"' in (root / 'changelogkit.toml').read_text(encoding='utf-8')
        text = (root / 'CHANGELOG.md').read_text(encoding='utf-8')
        assert text.index('## 1.4.0') < text.index('## 1.3.0')
        assert '- second' in text
        assert '- first' in text

    def test_writes_project_version(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Without current_version, [project].version in pyproject.toml is updated."""
        pyproject = tmp_path / 'pyproject.toml'
        pyproject.write_text('[project]\nname = "demo"\nversion = "0.4.2"\n', encoding='utf-8')
        with patch('changelogkit.cli.GitCLIBackend', return_value=FakeVCS(make_entries('fix: bar'))):
            assert main(['-q', '--dir', str(tmp_path), 'bump']) == 0
        assert capsys.readouterr().out == '0.4.3\n'
        text = pyproject.read_text(encoding='utf-8')
        assert 'version = "0.4.3"' in text
        assert 'name = "demo"' in text

    def test_dry_run_writes_nothing(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--dry-run prints the version but leaves every file alone."""
        root = _project(tmp_path)
        with patch('changelogkit.cli.GitCLIBackend', return_value=FakeVCS(make_entries('feat: x'))):
            assert main(['-q', '--dir', str(root), 'bump', '--dry-run']) == 0
        assert capsys.readouterr().out == '1.3.0\n'
        assert (root / 'changelogkit.toml').read_text(encoding='utf-8') == 'current_version = "1.2.3"\n'
        assert not (root / 'CHANGELOG.md').exists()
