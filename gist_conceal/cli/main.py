#!/usr/bin/env python3
"""
Command-line interface for gist-conceal.

Two steps:
    gist-conceal --gist-filename-match '/^output-/' -o gists.log fetch
    gist-conceal -i gists.log -o concealed.log conceal

`fetch` lists the user's matching public gists. `conceal` replaces each gist
listed in the input log (or every matching gist when no input is given) with
a secret copy and deletes the public original.
"""

from __future__ import annotations

import asyncio
import traceback
from collections.abc import Sequence
from pathlib import Path

import httpx
import pydantic
import typer

from gist_conceal.cli.logger import CLILogger
from gist_conceal.config import ConcealOptions, get_settings, resolve_options
from gist_conceal.exceptions import ConfigurationError, GistConcealError
from gist_conceal.github.client import GistClient
from gist_conceal.schemas.gist import ConcealedGist, GistRef
from gist_conceal.services.concealer import GistConcealService
from gist_conceal.services.lister import GistListerService
from gist_conceal.services.report import format_conceal_report, format_fetch_report, parse_input_log
from gist_conceal.services.transfer import GitContentTransfer
from gist_conceal.storage.local import read_text, write_text_atomic

app = typer.Typer(
    name='gist-conceal',
    help='Fetch public gists matching criteria, and conceal them as secret gists.',
    add_completion=False,
)

# Errors that end a run with a message instead of a traceback
RUN_ERRORS = (GistConcealError, httpx.HTTPError, pydantic.ValidationError, OSError)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    input: Path | None = typer.Option(None, '--input', '-i', help='Input file (for conceal).'),
    output: Path | None = typer.Option(None, '--output', '-o', help='Output file (for fetch/conceal).'),
    github_token: str | None = typer.Option(None, '--github-token', help='GitHub token (or use GITHUB_TOKEN env).'),
    github_throttle: float | None = typer.Option(
        None, '--github-throttle', help='Throttle time in milliseconds (or use GITHUB_THROTTLE env, default 4000).'
    ),
    gist_description_match: str | None = typer.Option(
        None, '--gist-description-match', help='Regex to match gist description (/pattern/flags or pattern).'
    ),
    gist_filename_match: str | None = typer.Option(
        None, '--gist-filename-match', help='Regex to match gist filename (/pattern/flags or pattern).'
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Show progress on stderr.'),
) -> None:
    """Fetch public gists matching criteria, and conceal them as secret gists."""
    raw = {
        'input': input,
        'output': output,
        'github_token': github_token,
        'github_throttle': github_throttle,
        'gist_description_match': gist_description_match,
        'gist_filename_match': gist_filename_match,
        'verbose': verbose,
    }
    if ctx.invoked_subcommand is None:
        _resolve(None, raw)  # Always fails: reports the missing command
    ctx.obj = raw


@app.command()
def fetch(ctx: typer.Context) -> None:
    """Fetch gists matching criteria."""
    options = _resolve('fetch', ctx.obj)
    asyncio.run(_fetch_async(options))


@app.command()
def conceal(ctx: typer.Context) -> None:
    """Conceal gists by creating new secret gists."""
    options = _resolve('conceal', ctx.obj)
    asyncio.run(_conceal_async(options))


def _resolve(command: str | None, raw: dict[str, object]) -> ConcealOptions:
    """Build options for a command, exiting with a message if they are invalid."""
    try:
        return resolve_options(command=command, settings=get_settings(), **raw)  # type: ignore[arg-type]
    except ConfigurationError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


async def _fetch_async(options: ConcealOptions) -> None:
    """Async implementation of fetch command."""
    logger = CLILogger(verbose=options.verbose)

    try:
        async with GistClient(options.github_token) as client:
            gists = await GistListerService(client, options).fetch_gists(logger=logger)
    except RUN_ERRORS as e:
        await logger.error(f'Failed to fetch gists: {e}')
        if options.verbose:
            traceback.print_exc()
        raise typer.Exit(1)

    if not await _emit_report(format_fetch_report(gists), options.output, logger):
        raise typer.Exit(1)


async def _conceal_async(options: ConcealOptions) -> None:
    """Async implementation of conceal command."""
    logger = CLILogger(verbose=options.verbose)
    transfer = GitContentTransfer(timeout=options.git_timeout)
    pairs: list[ConcealedGist] = []

    try:
        transfer.check_available()

        gists: Sequence[GistRef] = []
        if options.input:
            gists = parse_input_log(read_text(options.input))
            await logger.info(f'Read {len(gists)} gist IDs from {options.input}')

        async with GistClient(options.github_token) as client:
            if not options.input:
                gists = await GistListerService(client, options).fetch_gists(logger=logger)
            service = GistConcealService(client, options, transfer)
            await service.conceal_gists(gists, on_pair=pairs.append, logger=logger)
    except RUN_ERRORS as e:
        # Gists already concealed are gone from their old URLs: always report them
        if pairs:
            await logger.warning(f'Aborted after concealing {len(pairs)} gists; writing partial report.')
            await _emit_report(format_conceal_report(pairs), options.output, logger)
        await logger.error(f'Failed to conceal gists: {e}')
        if options.verbose:
            traceback.print_exc()
        raise typer.Exit(1)

    if not await _emit_report(format_conceal_report(pairs), options.output, logger):
        raise typer.Exit(1)


async def _emit_report(text: str, output: Path | None, logger: CLILogger) -> bool:
    """
    Write a report to the output file, or to stdout when there is none.

    A report that cannot be written is printed to stdout instead, so the
    ID mapping of an already finished run is never lost.

    Returns:
        False if the output file could not be written
    """
    if output is None:
        typer.echo(text, nl=False)
        return True
    try:
        path = write_text_atomic(output, text)
    except OSError as e:
        await logger.error(f'Failed to write report to {output}: {e}')
        typer.echo(text, nl=False)
        return False
    await logger.info(f'Wrote report to {path}')
    return True


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
