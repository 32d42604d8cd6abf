"""
Transfer Layer.

Writes downloaded bodies to disk with progress reporting and cleanup.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
