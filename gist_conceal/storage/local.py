"""
Local filesystem access for input logs and reports.

Reports are written atomically: content goes to a temporary file in the
destination directory which is then renamed over the destination, so an
interrupted run never leaves a half-written report.
"""

from __future__ import annotations

import os
import pathlib
import tempfile


def read_text(path: pathlib.Path) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    return path.read_text(encoding='utf-8')


def write_text_atomic(path: pathlib.Path, text: str) -> str:
    """
    Atomically replace `path` with `text`.

    Args:
        path: Destination file; its directory must exist
        text: Content to write (UTF-8)

    Returns:
        Absolute path of the written file

    Raises:
        FileNotFoundError: If the destination directory doesn't exist (fail-fast)
    """
    directory = path.parent
    if not directory.is_dir():
        raise FileNotFoundError(f'Output directory does not exist: {directory}. Please create it first.')

    fd, temp_name = tempfile.mkstemp(prefix=f'.{path.name}.', suffix='.tmp', dir=directory)
    try:
        f = os.fdopen(fd, 'w', encoding='utf-8')
    except BaseException:
        # fdopen did not take ownership of the descriptor
        os.close(fd)
        os.unlink(temp_name)
        raise

    try:
        with f:
            f.write(text)
        os.replace(temp_name, path)
    except BaseException:
        os.unlink(temp_name)
        raise

    return str(path.absolute())
