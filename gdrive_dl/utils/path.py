"""
Utilities for handling file names, directories, and Drive URL parsing.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

# Ordered: the bare-token fallback must only apply once the structured forms fail.
ID_PATTERNS = (
    re.compile(r"/file/d/([0-9A-Za-z_-]{10,})(?:/|$)", re.IGNORECASE),
    re.compile(r"/folders/([0-9A-Za-z_-]{10,})(?:/|$)", re.IGNORECASE),
    re.compile(r"id=([0-9A-Za-z_-]{10,})(?:&|$)", re.IGNORECASE),
    re.compile(r"([0-9A-Za-z_-]{10,})", re.IGNORECASE),
)

MAX_FILENAME_LENGTH = 255
_BLACKLIST = frozenset('\\/:*?"<>|\0')
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)


class ResourceKind(Enum):
    """The kind of Drive item a URL points at."""

    FILE = "file"
    FOLDER = "folder"


def url_to_id(url: str) -> Optional[str]:
    """
    Extracts the Drive identifier from a file, folder, open/uc URL or a bare ID.
    """
    for pattern in ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def classify_url(url: str) -> Optional[ResourceKind]:
    """Decides whether a Drive URL names a file or a folder."""
    lowered = url.lower()
    if "/file/" in lowered or "/uc?" in lowered:
        return ResourceKind.FILE
    if "/folders/" in lowered:
        return ResourceKind.FOLDER
    return None


def classify_entry_url(url: str) -> Optional[ResourceKind]:
    """Decides the kind of a folder listing entry; only view links are followed."""
    lowered = url.lower()
    if "/file/" in lowered:
        return ResourceKind.FILE
    if "/folders/" in lowered:
        return ResourceKind.FOLDER
    return None


def _sanitize_once(filename: str) -> str:
    name = unquote(filename)
    name = "".join(c for c in name if c not in _BLACKLIST and ord(c) > 31)
    name = name.rstrip(". ").strip()

    if not name.strip("."):
        name = "_" + name
    if name.upper() in _RESERVED_NAMES:
        name = "_" + name
    if not name:
        name = "_"

    if len(name) > MAX_FILENAME_LENGTH:
        base, dot, ext = name.rpartition(".")
        if dot and len(ext) + 1 < MAX_FILENAME_LENGTH:
            name = base[: MAX_FILENAME_LENGTH - len(ext) - 1] + dot + ext
        else:
            name = name[:MAX_FILENAME_LENGTH]
    return name


def sanitize(filename: str) -> str:
    """
    Turns an untrusted display name into a name that is valid on every common
    filesystem.

    The name is percent-decoded, stripped of reserved and control characters,
    trimmed, protected against device names and dot-only names, and capped at
    255 characters while keeping its extension. The cleanup is repeated until
    the name stops changing, so sanitizing twice gives the same result.
    """
    name = filename
    while True:
        cleaned = _sanitize_once(name)
        if cleaned == name:
            return cleaned
        name = cleaned


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
