"""
Gist models.

A gist reference is either partial (only an ID, read from an input log) or
full (fetched from the API). The two are distinguished by the `kind` tag
rather than by which fields happen to be present.
"""

from __future__ import annotations

from typing import Annotated, Literal

import pydantic

from gist_conceal.schemas.types import ApiModel, BaseStrictModel


class GistFile(ApiModel):
    """File metadata as listed in a gist payload (content is never needed)."""

    filename: str | None = None
    type: str | None = None
    language: str | None = None
    raw_url: str | None = None
    size: int | None = None


class Gist(ApiModel):
    """Fully populated gist, as returned by the GitHub gists API."""

    kind: Literal['full'] = 'full'
    id: str
    public: bool
    description: str | None = None
    files: dict[str, GistFile]
    html_url: str  # https://gist.github.com/{user}/{id}
    git_pull_url: str  # https://gist.github.com/{id}.git


class PartialGist(BaseStrictModel):
    """Gist known only by its ID; must be resolved before use."""

    kind: Literal['partial'] = 'partial'
    id: str


GistRef = Annotated[PartialGist | Gist, pydantic.Field(discriminator='kind')]


class ConcealedGist(BaseStrictModel):
    """Result of concealing one gist: the deleted public source and its secret replacement."""

    source: Gist
    target: Gist
