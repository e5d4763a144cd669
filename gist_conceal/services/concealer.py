"""
Gist concealer service - replaces public gists with secret copies.

GitHub cannot change the visibility of an existing gist, so each gist is
concealed by:
1. Resolving it (if only its ID is known)
2. Creating a secret gist with the same description and filenames, holding placeholder content
3. Transferring the real content through the gists' git repositories
4. Deleting the original public gist

Gists are processed strictly one at a time. Any failure aborts the batch:
step 4 is destructive, so partial failures are left to the operator rather
than retried or skipped. Pairs completed before the failure are reported
through `on_pair` as they finish.
"""

from __future__ import annotations

import asyncio
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

from gist_conceal.config import ConcealOptions
from gist_conceal.github.client import GistClient
from gist_conceal.protocols import ContentTransfer, LoggerProtocol, NullLogger
from gist_conceal.schemas.gist import ConcealedGist, Gist, GistRef, PartialGist
from gist_conceal.services.report import format_gist_details
from gist_conceal.services.throttle import SleepFunc, Throttle

__all__ = [
    'PLACEHOLDER_CONTENT',
    'GistConcealService',
]

# GitHub rejects files with empty content
PLACEHOLDER_CONTENT = 'EMPTY'


class GistConcealService:
    """Service for concealing gists by recreating them as secret gists."""

    def __init__(
        self,
        client: GistClient,
        options: ConcealOptions,
        transfer: ContentTransfer,
        *,
        sleep: SleepFunc | None = None,
    ) -> None:
        self.client = client
        self.options = options
        self.transfer = transfer
        self.throttle = Throttle(options.github_throttle, sleep or asyncio.sleep)

    async def conceal_gists(
        self,
        gists: Sequence[GistRef],
        on_pair: Callable[[ConcealedGist], None] | None = None,
        logger: LoggerProtocol | None = None,
    ) -> list[ConcealedGist]:
        """
        Conceal each gist in order.

        Args:
            gists: Full or partial gist references
            on_pair: Called with each pair right after its source gist is deleted
            logger: Progress logger

        Returns:
            (source, target) pairs in input order

        Raises:
            httpx.HTTPStatusError: If a GitHub API call fails
            ContentTransferError: If cloning, committing or pushing fails
        """
        logger = logger or NullLogger()
        pairs: list[ConcealedGist] = []

        # One scratch workspace for the batch, removed on every exit path
        with tempfile.TemporaryDirectory(prefix='gist-conceal-') as temp_dir:
            workspace = Path(temp_dir)
            for ref in gists:
                pair = await self._conceal_gist(ref, workspace, logger)
                pairs.append(pair)
                if on_pair:
                    on_pair(pair)

        return pairs

    async def _conceal_gist(self, ref: GistRef, workspace: Path, logger: LoggerProtocol) -> ConcealedGist:
        source = await self._resolve(ref)

        await logger.info(f'Concealing gist {source.id} ...')
        await logger.info(format_gist_details(source))

        target = await self.client.create_gist(
            description=source.description,
            files={filename: PLACEHOLDER_CONTENT for filename in source.files},
            public=False,
        )

        self.transfer.transfer(source, target, workspace)

        await self.client.delete_gist(source.id)
        await self.throttle()

        await logger.info(f'Concealed gist {source.id} as {target.id}.')
        await logger.info(format_gist_details(target))
        return ConcealedGist(source=source, target=target)

    async def _resolve(self, ref: GistRef) -> Gist:
        """Fetch a partial reference; the extra request is throttled."""
        if not isinstance(ref, PartialGist):
            return ref
        gist = await self.client.get_gist(ref.id)
        await self.throttle()
        return gist
