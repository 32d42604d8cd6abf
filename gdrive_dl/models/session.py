"""
Run-scoped state shared by the request engine and the retrieval engine.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional

from gdrive_dl.api.cookies import CookieStore
from gdrive_dl.storage.files import is_fresh

from .stats import DownloadStats


@dataclass
class Session:
    """
    Everything a single run mutates: cookies, visited folders, errors and stats.

    One instance is created per run and handed by reference to every
    component, so later requests see earlier cookies and earlier visits.
    """

    cookies: CookieStore = field(default_factory=CookieStore)
    processed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    stats: DownloadStats = field(default_factory=DownloadStats)
    _visited: set[str] = field(default_factory=set, repr=False)

    def mark_visited(self, folder_id: str) -> bool:
        """
        Records a folder visit.

        Returns:
            False if the folder was already visited during this run.
        """
        if folder_id in self._visited:
            return False
        self._visited.add(folder_id)
        self.processed.append(folder_id)
        return True

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ConfirmState:
    """Tokens the download endpoint asks for before it streams a large file."""

    confirm: str = ""
    uuid: str = ""

    def query_suffix(self) -> str:
        suffix = ""
        if self.confirm:
            suffix += f"&confirm={self.confirm}"
        if self.uuid:
            suffix += f"&uuid={self.uuid}"
        return suffix


@dataclass
class DownloadTarget:
    """Where a file goes and what is needed to consider it up to date."""

    path: Path
    modified: Optional[int] = None
    overwrite: bool = False

    def is_fresh(self) -> bool:
        return is_fresh(self.path, self.modified, self.overwrite)


class FolderEntry(NamedTuple):
    """One child item scraped from a folder listing page."""

    url: str
    name: str
    modified: str
