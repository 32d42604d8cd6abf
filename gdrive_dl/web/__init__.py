"""
Web Scraping Layer.

This package parses the HTML pages and headers Drive returns to anonymous
clients: folder listings, confirmation pages and download headers.
"""

from .listing import (
    extract_confirm_token,
    extract_uuid,
    filename_from_disposition,
    is_quota_exceeded,
    parse_folder_listing,
)

__all__ = [
    "extract_confirm_token",
    "extract_uuid",
    "filename_from_disposition",
    "is_quota_exceeded",
    "parse_folder_listing",
]
