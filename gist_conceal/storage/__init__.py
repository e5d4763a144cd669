"""Local file storage for input logs and reports."""

from gist_conceal.storage.local import read_text, write_text_atomic

__all__ = ['read_text', 'write_text_atomic']
