"""
Pure helpers: URL and filename handling, timestamp parsing, and formatting.
"""

from .path import (
    ResourceKind,
    classify_entry_url,
    classify_url,
    create_dir,
    sanitize,
    url_to_id,
)
from .timestamps import parse_modified_time

__all__ = [
    "ResourceKind",
    "classify_entry_url",
    "classify_url",
    "create_dir",
    "parse_modified_time",
    "sanitize",
    "url_to_id",
]
