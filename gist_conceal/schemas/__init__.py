"""Models for gists and operation results."""

from gist_conceal.schemas.gist import ConcealedGist, Gist, GistFile, GistRef, PartialGist

__all__ = ['ConcealedGist', 'Gist', 'GistFile', 'GistRef', 'PartialGist']
