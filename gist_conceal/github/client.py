"""
GitHub Gist API client.

Thin async wrapper over the list/get/create/delete gist endpoints. All calls
are authenticated with the user's token; failures surface as
httpx.HTTPStatusError and are never retried.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType

import httpx
import pydantic

from gist_conceal.schemas.gist import Gist

_GistList = pydantic.TypeAdapter(list[Gist])


class GistClient:
    """
    GitHub gists API client.

    Use as an async context manager; the underlying connection pool is
    closed on exit.
    """

    BASE_URL = 'https://api.github.com'

    def __init__(
        self,
        token: str,
        *,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the API client.

        Args:
            token: GitHub Personal Access Token with 'gist' scope
            base_url: API root (overridable for GitHub Enterprise)
            transport: Optional httpx transport (tests inject httpx.MockTransport)
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                'Authorization': f'Bearer {token}',
                'Accept': 'application/vnd.github.v3+json',
                'X-GitHub-Api-Version': '2022-11-28',
            },
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> GistClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_gists(self, *, page: int, per_page: int) -> list[Gist]:
        """
        List one page of the authenticated user's gists.

        Args:
            page: 1-based page number
            per_page: Page size (GitHub caps this at 100)

        Raises:
            httpx.HTTPStatusError: If GitHub API call fails
        """
        response = await self._client.get('/gists', params={'page': page, 'per_page': per_page})
        response.raise_for_status()
        return _GistList.validate_python(response.json())

    async def get_gist(self, gist_id: str) -> Gist:
        """Fetch a single gist by ID."""
        response = await self._client.get(f'/gists/{gist_id}')
        response.raise_for_status()
        return Gist.model_validate(response.json())

    async def create_gist(
        self,
        *,
        description: str | None,
        files: Mapping[str, str],
        public: bool = False,
    ) -> Gist:
        """
        Create a new gist.

        Args:
            description: Gist description (omitted from the request when None)
            files: Mapping of filename to text content (GitHub rejects empty content)
            public: Visibility of the new gist (default: secret)

        Returns:
            The created gist
        """
        payload: dict[str, object] = {
            'public': public,
            'files': {filename: {'content': content} for filename, content in files.items()},
        }
        if description is not None:
            payload['description'] = description

        response = await self._client.post('/gists', json=payload)
        response.raise_for_status()
        return Gist.model_validate(response.json())

    async def delete_gist(self, gist_id: str) -> None:
        """Delete a gist by ID."""
        response = await self._client.delete(f'/gists/{gist_id}')
        response.raise_for_status()
