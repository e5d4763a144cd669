"""Service layer for gist operations."""

from gist_conceal.services.concealer import PLACEHOLDER_CONTENT, GistConcealService
from gist_conceal.services.lister import PER_PAGE, GistListerService, gist_matches
from gist_conceal.services.report import (
    format_conceal_report,
    format_fetch_report,
    format_gist_details,
    parse_input_log,
)
from gist_conceal.services.throttle import Throttle
from gist_conceal.services.transfer import COMMIT_MESSAGE, GitContentTransfer

__all__ = [
    'COMMIT_MESSAGE',
    'PER_PAGE',
    'PLACEHOLDER_CONTENT',
    'GistConcealService',
    'GistListerService',
    'GitContentTransfer',
    'Throttle',
    'format_conceal_report',
    'format_fetch_report',
    'format_gist_details',
    'gist_matches',
    'parse_input_log',
]
