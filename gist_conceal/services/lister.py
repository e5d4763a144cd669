"""
Gist lister service - pages through the user's gists and filters them.

Only public gists are candidates (secret ones are already concealed). A gist
matches when its description matches the description pattern and at least
one of its filenames matches the filename pattern.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable

from gist_conceal.config import ConcealOptions
from gist_conceal.github.client import GistClient
from gist_conceal.protocols import LoggerProtocol, NullLogger
from gist_conceal.schemas.gist import Gist
from gist_conceal.services.throttle import SleepFunc, Throttle

__all__ = [
    'PER_PAGE',
    'GistListerService',
    'gist_matches',
]

PER_PAGE = 100  # GitHub maximum


def gist_matches(gist: Gist, description_match: re.Pattern[str], filename_match: re.Pattern[str]) -> bool:
    """Check whether a gist is public and passes both filters."""
    if not gist.public:
        return False
    if not description_match.search(gist.description or ''):
        return False
    return any(filename_match.search(filename) for filename in gist.files)


class GistListerService:
    """Service for fetching the authenticated user's matching public gists."""

    def __init__(self, client: GistClient, options: ConcealOptions, *, sleep: SleepFunc | None = None) -> None:
        self.client = client
        self.options = options
        self.throttle = Throttle(options.github_throttle, sleep or asyncio.sleep)

    async def fetch_gists(
        self,
        on_gist: Callable[[Gist], None] | None = None,
        logger: LoggerProtocol | None = None,
    ) -> list[Gist]:
        """
        Fetch all matching gists, in the order GitHub lists them.

        Args:
            on_gist: Called with each matching gist as soon as its page arrives
            logger: Progress logger

        Returns:
            Matching gists in discovery order

        Raises:
            httpx.HTTPStatusError: If a page request fails
        """
        logger = logger or NullLogger()
        gists: list[Gist] = []
        seen: set[str] = set()

        page = 1
        while True:
            batch = await self.client.list_gists(page=page, per_page=PER_PAGE)

            for gist in batch:
                if gist.id in seen:
                    continue
                if not gist_matches(gist, self.options.gist_description_match, self.options.gist_filename_match):
                    continue
                seen.add(gist.id)
                gists.append(gist)
                if on_gist:
                    on_gist(gist)

            await logger.info(f'Found {len(gists)} matching gists...')

            # A short page is the last page
            if len(batch) < PER_PAGE:
                break

            await self.throttle()
            page += 1

        await logger.info(f'Found a total of {len(gists)} matching gists.')
        return gists
