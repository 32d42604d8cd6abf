"""
Local file checks used to skip downloads that are already on disk.
"""

import logging
import math
import os
from pathlib import Path
from typing import Optional, Union

from rich.markup import escape

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def is_fresh(
    path: PathLike, expected_mtime: Optional[int] = None, overwrite: bool = False
) -> bool:
    """
    Decides whether the file at `path` can be treated as already downloaded.

    Args:
        path: Destination path of the download.
        expected_mtime: Remote modification time in epoch seconds, if known.
        overwrite: Forces a fresh download when set.

    Returns:
        True when the file exists and, if an expected time was given, its
        modification time truncated to whole seconds matches it exactly.
    """
    if overwrite:
        return False
    try:
        stat_result = os.stat(path)
    except OSError:
        return False
    if expected_mtime is not None:
        return math.floor(stat_result.st_mtime) == expected_mtime
    return True


def set_modified_time(path: PathLike, timestamp: Optional[int]) -> None:
    """Applies a remote modification time to a local file, ignoring failures."""
    if timestamp is None:
        return
    try:
        os.utime(path, (timestamp, timestamp))
    except OSError as e:
        log.debug(
            f"Could not set modified time on '{escape(str(path))}': {escape(str(e))}"
        )
