"""
Shared protocols for gist-conceal services.

Single source of truth for the interfaces services depend on, so that the CLI
and the tests can plug in their own implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from gist_conceal.schemas.gist import Gist


class LoggerProtocol(Protocol):
    """
    Protocol for async logger - enables services to work with any logging implementation.

    Implementations:
    - CLILogger (cli/logger.py): Logs to stderr with optional verbose mode
    - NullLogger (below): No-op implementation for when logging is optional
    """

    async def info(self, message: str) -> None: ...
    async def warning(self, message: str) -> None: ...
    async def error(self, message: str) -> None: ...


class NullLogger:
    """No-op logger implementation for when logging is optional."""

    async def info(self, message: str) -> None:
        pass

    async def warning(self, message: str) -> None:
        pass

    async def error(self, message: str) -> None:
        pass


class ContentTransfer(Protocol):
    """
    Copies all file content of one gist into another and publishes it.

    Implementations:
    - GitContentTransfer (services/transfer.py): clone, copy, commit and push with the git CLI
    """

    def transfer(self, source: Gist, target: Gist, workspace: Path) -> None:
        """
        Replace the content of `target` with the content of `source`.

        Args:
            source: Gist whose files are copied
            target: Gist that receives the files
            workspace: Scratch directory owned by the caller; left as it was found

        Raises:
            ContentTransferError: If any step of the transfer fails
        """
        ...
