"""
Shared exceptions for gist-conceal.

Exception Hierarchy:
    GistConcealError (base)
    ├── ConfigurationError (invalid options, raised before any network call)
    └── ContentTransferError (clone/commit/push failures)
"""

from __future__ import annotations

from collections.abc import Sequence


class GistConcealError(Exception):
    """Base exception for all gist-conceal errors."""


class ConfigurationError(GistConcealError):
    """Raised when options are missing or invalid."""


class ContentTransferError(GistConcealError):
    """Raised when copying gist content between repositories fails."""

    def __init__(self, command: Sequence[str], returncode: int | None, stderr: str = '') -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        status = 'timed out' if returncode is None else f'exited with status {returncode}'
        message = f'Command `{" ".join(self.command)}` {status}'
        if stderr.strip():
            message += f':\n{stderr.strip()}'
        super().__init__(message)
