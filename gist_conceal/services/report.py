"""
Report formatting for fetch and conceal results, and input log parsing.

Fetch report, one block per gist:

    <id>
    # URL: <html_url>
    # Description: <description>
    # Files: a.txt, b.txt
    <blank line>

Conceal report, one block per pair:

    <source id> -> <target id>
    # URL: ... (details of the target gist)
    <blank line>

Lines starting with `#` are comments, so a fetch report can be fed straight
back in as the conceal input log.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from gist_conceal.schemas.gist import ConcealedGist, Gist, PartialGist

__all__ = [
    'format_conceal_report',
    'format_fetch_report',
    'format_gist_details',
    'parse_input_log',
]

_COMMENT_LINE = re.compile(r'^#.*$', re.MULTILINE)


def format_gist_details(gist: Gist) -> str:
    """Format the comment block describing a gist."""
    # Multi-line descriptions are folded so every detail line stays a comment
    description = ' '.join((gist.description or '').splitlines())
    return (
        f'# URL: {gist.html_url}\n'
        f'# Description: {description}\n'
        f'# Files: {", ".join(gist.files)}\n'
    )


def format_fetch_report(gists: Iterable[Gist]) -> str:
    return ''.join(f'{gist.id}\n{format_gist_details(gist)}\n' for gist in gists)


def format_conceal_report(pairs: Iterable[ConcealedGist]) -> str:
    return ''.join(
        f'{pair.source.id} -> {pair.target.id}\n{format_gist_details(pair.target)}\n' for pair in pairs
    )


def parse_input_log(text: str) -> list[PartialGist]:
    """Read gist IDs from a log: comment lines are dropped, the rest split on whitespace."""
    return [PartialGist(id=gist_id) for gist_id in _COMMENT_LINE.sub('', text).split()]
