"""Fetch public GitHub gists by pattern and conceal them as secret gists."""

__version__ = '0.1.0'
