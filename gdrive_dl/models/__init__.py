"""
Data Models Layer.

This package contains the configuration model, the run session, and the
small value types threaded through a download run.
"""

from .config import DownloadConfig
from .session import ConfirmState, DownloadTarget, FolderEntry, Session
from .stats import DownloadStats

__all__ = [
    "ConfirmState",
    "DownloadConfig",
    "DownloadStats",
    "DownloadTarget",
    "FolderEntry",
    "Session",
]
