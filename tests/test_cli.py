"""Tests for the gist-conceal command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import gist_conceal.cli.main as cli_main
from fakes import FakeGistApi, RecordingTransfer, make_gist_payload
from gist_conceal.cli.main import app

runner = CliRunner()


class FakeGitTransfer(RecordingTransfer):
    """Stands in for GitContentTransfer inside the CLI."""

    instances: list[FakeGitTransfer] = []
    fail_for_next: set[str] = set()

    def __init__(self, timeout: float | None = None) -> None:
        super().__init__(fail_for=set(self.fail_for_next))
        self.timeout = timeout
        FakeGitTransfer.instances.append(self)

    def check_available(self) -> None:
        pass


@pytest.fixture
def api(clean_env: pytest.MonkeyPatch) -> FakeGistApi:
    fake = FakeGistApi(
        [
            make_gist_payload('abc123', 'output-1.txt', description='Run 1'),
            make_gist_payload('def456', 'notes.txt', description='Notes'),
            make_gist_payload('0a1b2c', 'output-2.txt', public=False),
        ]
    )
    clean_env.setattr(cli_main, 'GistClient', lambda token: fake.client(token))
    FakeGitTransfer.instances = []
    FakeGitTransfer.fail_for_next = set()
    clean_env.setattr(cli_main, 'GitContentTransfer', FakeGitTransfer)
    return fake


def test_help() -> None:
    result = runner.invoke(app, ['--help'])

    assert result.exit_code == 0
    assert 'fetch' in result.output
    assert 'conceal' in result.output
    assert '--gist-filename-match' in result.output


def test_missing_command(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't'])

    assert result.exit_code == 1
    assert 'Missing command!' in result.output


def test_missing_token(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['fetch'])

    assert result.exit_code == 1
    assert 'Missing GitHub token!' in result.output


def test_negative_throttle(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't', '--github-throttle', '-5', 'fetch'])

    assert result.exit_code == 1
    assert 'GitHub throttle must be a number >= 0!' in result.output


def test_malformed_throttle(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't', '--github-throttle', 'soon', 'fetch'])

    assert result.exit_code == 2


def test_invalid_regex(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't', '--gist-filename-match', '/(/', 'fetch'])

    assert result.exit_code == 1
    assert 'Invalid regular expression' in result.output


def test_unknown_option(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't', '--bogus', 'fetch'])

    assert result.exit_code == 2


def test_unknown_command(clean_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ['--github-token', 't', 'publish'])

    assert result.exit_code == 2


def test_fetch_to_stdout(api: FakeGistApi) -> None:
    result = runner.invoke(
        app,
        ['--github-token', 't', '--github-throttle', '0', '--gist-filename-match', '/^output-/', 'fetch'],
    )

    assert result.exit_code == 0, result.output
    assert 'abc123\n# URL: https://gist.github.com/octocat/abc123\n' in result.output
    assert 'def456' not in result.output
    assert '0a1b2c' not in result.output
    assert api.requests[0].headers['Authorization'] == 'Bearer t'


def test_fetch_uses_token_from_environment(api: FakeGistApi, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv('GITHUB_TOKEN', 'env-token')
    clean_env.setenv('GITHUB_THROTTLE', '0')

    result = runner.invoke(app, ['fetch'])

    assert result.exit_code == 0, result.output
    assert api.requests[0].headers['Authorization'] == 'Bearer env-token'


def test_fetch_to_file(api: FakeGistApi, tmp_path: Path) -> None:
    output = tmp_path / 'gists.log'

    result = runner.invoke(
        app,
        [
            '--github-token', 't', '--github-throttle', '0',
            '--gist-description-match', '/notes/i', '-o', str(output), 'fetch',
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.read_text() == (
        'def456\n'
        '# URL: https://gist.github.com/octocat/def456\n'
        '# Description: Notes\n'
        '# Files: notes.txt\n'
        '\n'
    )


def test_conceal_from_fetch_log(api: FakeGistApi, tmp_path: Path) -> None:
    log = tmp_path / 'gists.log'
    concealed = tmp_path / 'concealed.log'
    common = ['--github-token', 't', '--github-throttle', '0']

    fetched = runner.invoke(app, [*common, '--gist-filename-match', '/^output-/', '-o', str(log), 'fetch'])
    assert fetched.exit_code == 0, fetched.output

    result = runner.invoke(app, [*common, '-i', str(log), '-o', str(concealed), 'conceal'])

    assert result.exit_code == 0, result.output
    assert api.deleted == ['abc123']
    assert api.created[0]['public'] is False
    assert concealed.read_text() == (
        'abc123 -> secret1\n'
        '# URL: https://gist.github.com/octocat/secret1\n'
        '# Description: Run 1\n'
        '# Files: output-1.txt\n'
        '\n'
    )


def test_conceal_without_input_fetches_matches(api: FakeGistApi) -> None:
    result = runner.invoke(
        app,
        ['--github-token', 't', '--github-throttle', '0', '--gist-description-match', 'Notes', 'conceal'],
    )

    assert result.exit_code == 0, result.output
    assert api.deleted == ['def456']
    assert 'def456 -> secret1\n' in result.output


def test_conceal_failure_writes_partial_report(api: FakeGistApi, tmp_path: Path) -> None:
    log = tmp_path / 'gists.log'
    log.write_text('# two gists\nabc123\ndef456\n')
    concealed = tmp_path / 'concealed.log'
    FakeGitTransfer.fail_for_next = {'def456'}

    result = runner.invoke(
        app,
        ['--github-token', 't', '--github-throttle', '0', '-i', str(log), '-o', str(concealed), 'conceal'],
    )

    assert result.exit_code == 1
    assert 'remote rejected' in result.output
    assert api.deleted == ['abc123']
    assert concealed.read_text().startswith('abc123 -> secret1\n')
    assert 'def456' not in concealed.read_text()


def test_conceal_missing_input_file(api: FakeGistApi, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ['--github-token', 't', '-i', str(tmp_path / 'missing.log'), 'conceal'],
    )

    assert result.exit_code == 1
    assert api.requests == []


def test_git_timeout_from_environment(api: FakeGistApi, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv('GIST_CONCEAL_GIT_TIMEOUT', '90')
    log = tmp_path / 'gists.log'
    log.write_text('')

    result = runner.invoke(app, ['--github-token', 't', '-i', str(log), 'conceal'])

    assert result.exit_code == 0, result.output
    assert FakeGitTransfer.instances[0].timeout == 90


def test_conceal_failure_without_output_prints_partial_report(api: FakeGistApi, tmp_path: Path) -> None:
    log = tmp_path / 'gists.log'
    log.write_text('abc123\ndef456\n')
    FakeGitTransfer.fail_for_next = {'def456'}

    result = runner.invoke(app, ['--github-token', 't', '--github-throttle', '0', '-i', str(log), 'conceal'])

    assert result.exit_code == 1
    assert api.deleted == ['abc123']
    assert 'abc123 -> secret1\n' in result.output
    assert 'def456 ->' not in result.output
    assert 'remote rejected' in result.output


def test_missing_output_directory_fails_before_any_request(api: FakeGistApi, tmp_path: Path) -> None:
    log = tmp_path / 'gists.log'
    log.write_text('abc123\n')
    output = tmp_path / 'missing' / 'dir' / 'concealed.log'

    result = runner.invoke(app, ['--github-token', 't', '-i', str(log), '-o', str(output), 'conceal'])

    assert result.exit_code == 1
    assert 'Output directory does not exist' in result.output
    assert api.requests == []
    assert api.deleted == []
    assert FakeGitTransfer.instances == []


def test_unwritable_report_is_printed_instead(api: FakeGistApi, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    log = tmp_path / 'gists.log'
    log.write_text('abc123\n')

    def deny(path: Path, text: str) -> str:
        raise PermissionError(f'Permission denied: {path}')

    clean_env.setattr(cli_main, 'write_text_atomic', deny)

    result = runner.invoke(
        app,
        ['--github-token', 't', '--github-throttle', '0', '-i', str(log), '-o', str(tmp_path / 'out.log'), 'conceal'],
    )

    assert result.exit_code == 1
    assert api.deleted == ['abc123']
    assert 'Failed to write report' in result.output
    assert 'abc123 -> secret1\n' in result.output


def test_malformed_gist_payload_is_reported(api: FakeGistApi) -> None:
    del api.gists[0]['git_pull_url']

    result = runner.invoke(app, ['--github-token', 't', 'fetch'])

    assert result.exit_code == 1
    assert 'Failed to fetch gists' in result.output
    assert 'git_pull_url' in result.output
