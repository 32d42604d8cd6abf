"""
Parses the HTML pages Drive serves instead of an API: the embedded folder
listing, the download confirmation page, and the Content-Disposition header.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from gdrive_dl.models.session import FolderEntry

log = logging.getLogger(__name__)

# Pre-compiled regex for performance
_CONFIRM_PATTERNS = (
    re.compile(r"confirm=([0-9A-Za-z_-]+)", re.IGNORECASE),
    re.compile(r'name="confirm"\s+value="([0-9A-Za-z_-]+)"', re.IGNORECASE),
)
_UUID_PATTERN = re.compile(r'name="uuid"\s+value="([0-9A-Za-z_-]+)"', re.IGNORECASE)
_FILENAME_PATTERN = re.compile(r'filename="(.*?)"', re.IGNORECASE)
_FILENAME_EXT_PATTERN = re.compile(r"filename\*=UTF-8''([^;]+)", re.IGNORECASE)

_ENTRY_URL_PREFIX = "https://drive.google.com/"
QUOTA_MARKER = "Google Drive - Quota exceeded"


def parse_folder_listing(page_html: str) -> list[FolderEntry]:
    """
    Extracts every child entry of an embedded folder view, in page order.

    An entry is a Drive link that wraps both a `flip-entry-title` and a
    `flip-entry-last-modified` block. Duplicates are kept.
    """
    soup = BeautifulSoup(page_html, "html.parser")
    entries = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href.startswith(_ENTRY_URL_PREFIX):
            continue
        title = anchor.select_one("div.flip-entry-title")
        modified = anchor.select_one("div.flip-entry-last-modified > div")
        if title is None or modified is None:
            continue
        entries.append(
            FolderEntry(url=href, name=title.get_text(), modified=modified.get_text())
        )
    log.debug(f"Found {len(entries)} entries in folder listing.")
    return entries


def extract_confirm_token(page_html: str) -> Optional[str]:
    """Finds the confirm token on a confirmation page; the first pattern wins."""
    for pattern in _CONFIRM_PATTERNS:
        match = pattern.search(page_html)
        if match:
            return match.group(1)
    return None


def extract_uuid(page_html: str) -> str:
    match = _UUID_PATTERN.search(page_html)
    return match.group(1) if match else ""


def is_quota_exceeded(page_html: str) -> bool:
    return QUOTA_MARKER in page_html


def filename_from_disposition(content_disposition: str) -> Optional[str]:
    """
    Reads the file name from a Content-Disposition header.

    The quoted `filename="..."` form is preferred; the RFC 5987
    `filename*=UTF-8''...` form is used when it is the only one present.
    The result is not sanitized.
    """
    match = _FILENAME_PATTERN.search(content_disposition)
    if match and match.group(1):
        return match.group(1)
    match = _FILENAME_EXT_PATTERN.search(content_disposition)
    if match:
        return match.group(1).strip()
    return None
