"""
CLI logger adapter - implements LoggerProtocol for command-line usage.

All messages go to stderr; stdout is reserved for reports.
"""

from __future__ import annotations

import typer


class CLILogger:
    """
    Logger implementation for CLI (implements LoggerProtocol from services).

    Outputs messages to stderr with optional verbose mode.
    """

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize CLI logger.

        Args:
            verbose: If True, show info messages. If False, only warnings/errors.
        """
        self.verbose = verbose

    async def info(self, message: str) -> None:
        """Log info message (only if verbose)."""
        if self.verbose:
            typer.echo(message, err=True)

    async def warning(self, message: str) -> None:
        """Log warning message."""
        typer.secho(f'Warning: {message}', fg=typer.colors.YELLOW, err=True)

    async def error(self, message: str) -> None:
        """Log error message."""
        typer.secho(f'Error: {message}', fg=typer.colors.RED, err=True)
