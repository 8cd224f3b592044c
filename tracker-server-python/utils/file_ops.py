"""
Atomic file operations for CSV exports.

Exports are written to a temporary file in the target directory and renamed
into place, so an export file is never left partially written.
"""

import os
import tempfile
from pathlib import Path
from typing import Union


def atomic_write(file_path: Union[str, Path], content: str) -> None:
    """
    Write content to file atomically using temporary file + rename.

    Parent directories are created as needed. File handles are always
    closed, even on failure.

    Args:
        file_path: Target file path (string or Path object)
        content: Text to write, encoded as UTF-8

    Raises:
        OSError: If directory creation, file write, or rename fails

    Examples:
        >>> atomic_write("data/exports/jobs.csv", "companyName,jobUrl\\n")
        >>> Path("data/exports/jobs.csv").read_text()
        'companyName,jobUrl\\n'
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = None
    temp_path = None

    try:
        # Same directory as the target so the rename stays on one filesystem
        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
        )
        os.write(temp_fd, content.encode("utf-8"))
        os.fsync(temp_fd)
        os.close(temp_fd)
        temp_fd = None

        os.replace(temp_path, file_path)

    except Exception:
        if temp_fd is not None:
            try:
                os.close(temp_fd)
            except OSError:
                pass

        if temp_path is not None and os.path.exists(temp_path):
            try:
                os.unlink(temp_path)
            except OSError:
                pass

        raise
