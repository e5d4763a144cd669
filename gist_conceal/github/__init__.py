"""GitHub API access."""

from gist_conceal.github.client import GistClient

__all__ = ['GistClient']
