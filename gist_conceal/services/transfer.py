"""
Git content transfer - copies a gist's files into another gist via its repository.

Content never goes through the API: the source repository is cloned, its
working tree copied over a clone of the target, and the result pushed. This
keeps byte-exact content (binary and large files included) and avoids API
payload limits.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

import attrs

from gist_conceal.exceptions import ContentTransferError
from gist_conceal.schemas.gist import Gist

__all__ = [
    'COMMIT_MESSAGE',
    'GitContentTransfer',
    'copy_working_tree',
]

COMMIT_MESSAGE = 'conceal gist'
SOURCE_DIRNAME = 'source_gist'
TARGET_DIRNAME = 'target_gist'


def copy_working_tree(source_dir: Path, target_dir: Path) -> None:
    """Copy every file (hidden and nested included) except the .git directory, overwriting."""
    for entry in source_dir.iterdir():
        if entry.name == '.git':
            continue
        destination = target_dir / entry.name
        if entry.is_dir():
            shutil.copytree(entry, destination, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, destination)


@attrs.define(frozen=True)
class GitContentTransfer:
    """ContentTransfer implementation backed by the git CLI."""

    timeout: float | None = None  # seconds per git command, None = unbounded
    git: str = 'git'  # executable name or path

    def check_available(self) -> None:
        """
        Raises:
            ContentTransferError: If the git executable cannot be found
        """
        if not shutil.which(self.git):
            raise ContentTransferError([self.git], returncode=127, stderr=f'{self.git} not found in PATH')

    def transfer(self, source: Gist, target: Gist, workspace: Path) -> None:
        source_dir = workspace / SOURCE_DIRNAME
        target_dir = workspace / TARGET_DIRNAME

        try:
            self._run(['clone', source.git_pull_url, SOURCE_DIRNAME], cwd=workspace)
            self._run(['clone', target.git_pull_url, TARGET_DIRNAME], cwd=workspace)
            copy_working_tree(source_dir, target_dir)
            self._run(['add', '.'], cwd=target_dir)

            # Placeholders can equal the real content, leaving nothing to commit
            if self._run(['status', '--porcelain'], cwd=target_dir).strip():
                self._run(['commit', '-m', COMMIT_MESSAGE], cwd=target_dir)
                self._run(['push'], cwd=target_dir)
        finally:
            for directory in (source_dir, target_dir):
                if directory.exists():
                    shutil.rmtree(directory)

    def _run(self, args: Sequence[str], cwd: Path) -> str:
        """Run a git command and return its stdout."""
        command = [self.git, *args]
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ContentTransferError(command, returncode=None) from e

        if result.returncode != 0:
            raise ContentTransferError(command, result.returncode, result.stderr)
        return result.stdout
