"""
Dataclass for tracking download run statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Counts what a run downloaded, skipped and created."""

    files_downloaded: int = 0
    files_skipped: int = 0
    folders_processed: int = 0
    bytes_downloaded: int = 0
    start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_download(self, size: int) -> None:
        self.files_downloaded += 1
        self.bytes_downloaded += size

    def elapsed(self) -> float:
        """Seconds since the run started."""
        return time.monotonic() - self.start_time
