"""
Configuration for gist-conceal.

Options are resolved once per run, in increasing priority, from built-in
defaults, environment variables (optionally loaded from a .env file) and
command-line flags. The result is an immutable ConcealOptions value that is
passed explicitly to every service.
"""

from __future__ import annotations

import functools
import math
import operator
import os
import pathlib
import re
from typing import Literal, TypeVar

import pydantic
import pydantic_settings

from gist_conceal.exceptions import ConfigurationError

DEFAULT_THROTTLE_MS = 4000.0
MATCH_ALL = re.compile('.*')

Command = Literal['fetch', 'conceal']
COMMANDS: tuple[Command, ...] = ('fetch', 'conceal')

# `/pattern/flags` literal; `g` and `y` only affect repeated matching and map to nothing here
_REGEX_LITERAL = re.compile(r'^/(.*)/([gimsuy]*)$', re.DOTALL)
_REGEX_FLAGS = {
    'g': re.NOFLAG,
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'u': re.UNICODE,
    'y': re.NOFLAG,
}

T = TypeVar('T', bound='GistConcealSettings')


class GistConcealSettings(pydantic_settings.BaseSettings):
    """Environment-level configuration."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        env_ignore_empty=True,  # GITHUB_THROTTLE= behaves as unset
        extra='forbid',  # Reject unknown keys in .env files
    )

    GITHUB_TOKEN: str | None = None
    GITHUB_THROTTLE: float = DEFAULT_THROTTLE_MS  # milliseconds
    GIST_CONCEAL_GIT_TIMEOUT: float | None = None  # seconds per git command, None = unbounded


def get_settings(settings_class: type[T] = GistConcealSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the .env file doesn't exist or a value is invalid
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    try:
        if not env_file_path:
            return settings_class()  # No .env file, load from environment only

        resolved_path = pathlib.Path(env_file_path).resolve()
        if not resolved_path.exists():
            raise ConfigurationError(f'Environment file not found: {resolved_path}')

        return settings_class(_env_file=resolved_path)
    except pydantic.ValidationError as e:
        raise ConfigurationError(_describe_validation_error(e)) from e


class ConcealOptions(pydantic.BaseModel):
    """Immutable per-run options shared by the fetch and conceal commands."""

    model_config = pydantic.ConfigDict(extra='forbid', frozen=True)

    command: Command
    github_token: str = pydantic.Field(min_length=1)
    github_throttle: float = DEFAULT_THROTTLE_MS  # milliseconds
    gist_description_match: re.Pattern[str] = MATCH_ALL
    gist_filename_match: re.Pattern[str] = MATCH_ALL
    input: pathlib.Path | None = None
    output: pathlib.Path | None = None
    git_timeout: float | None = None
    verbose: bool = False

    @pydantic.field_validator('github_throttle')
    @classmethod
    def validate_throttle(cls, v: float) -> float:
        """Reject negative and non-numeric (NaN, infinite) throttle values."""
        if not math.isfinite(v) or v < 0:
            raise ValueError('GitHub throttle must be a number >= 0!')
        return v


def parse_regex(text: str) -> re.Pattern[str]:
    """
    Parse text into a compiled regular expression.

    Accepts `/pattern/flags` (flags from `gimsuy`) or a bare pattern with no flags.

    Raises:
        ConfigurationError: If the pattern does not compile
    """
    match = _REGEX_LITERAL.match(text)
    pattern, flag_text = match.groups() if match else (text, '')
    flags = functools.reduce(operator.or_, (_REGEX_FLAGS[c] for c in flag_text), re.NOFLAG)
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ConfigurationError(f'Invalid regular expression {text!r}: {e}') from e


def resolve_options(
    *,
    command: str | None,
    settings: GistConcealSettings,
    github_token: str | None = None,
    github_throttle: float | None = None,
    gist_description_match: str | None = None,
    gist_filename_match: str | None = None,
    input: pathlib.Path | None = None,
    output: pathlib.Path | None = None,
    verbose: bool = False,
) -> ConcealOptions:
    """
    Merge CLI values over environment settings over defaults, and validate.

    Raises:
        ConfigurationError: If the command or token is missing, the output directory does not
            exist, or any value is invalid
    """
    if not command:
        raise ConfigurationError('Missing command!')
    if command not in COMMANDS:
        raise ConfigurationError(f'Unknown command: {command}')

    token = github_token or settings.GITHUB_TOKEN
    if not token:
        raise ConfigurationError('Missing GitHub token!')

    # Before any network call: conceal deletes source gists well before the report is written
    if output is not None and not output.parent.is_dir():
        raise ConfigurationError(f'Output directory does not exist: {output.parent}. Please create it first.')

    try:
        return ConcealOptions(
            command=command,
            github_token=token,
            github_throttle=settings.GITHUB_THROTTLE if github_throttle is None else github_throttle,
            gist_description_match=(
                MATCH_ALL if gist_description_match is None else parse_regex(gist_description_match)
            ),
            gist_filename_match=MATCH_ALL if gist_filename_match is None else parse_regex(gist_filename_match),
            input=input,
            output=output,
            git_timeout=settings.GIST_CONCEAL_GIT_TIMEOUT,
            verbose=verbose,
        )
    except pydantic.ValidationError as e:
        raise ConfigurationError(_describe_validation_error(e)) from e


def _describe_validation_error(error: pydantic.ValidationError) -> str:
    """Flatten a pydantic error into a single human-readable line."""
    messages = []
    for detail in error.errors():
        message = detail['msg'].removeprefix('Value error, ')
        location = '.'.join(str(part) for part in detail['loc'])
        messages.append(message if detail['type'] == 'value_error' else f'{location}: {message}')
    return '; '.join(messages)
