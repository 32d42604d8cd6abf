"""
Streams an HTTP response body to disk, never leaving a partial file behind.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp
from rich.markup import escape

from gdrive_dl.cli.progress import ProgressReporter

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROGRESS_STEP = 1024 * 1024


class Downloader:
    """A low-level file writer for already-open download responses."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, progress_step: int = PROGRESS_STEP):
        self.chunk_size = chunk_size
        self.progress_step = progress_step

    async def stream_to_file(
        self,
        response: aiohttp.ClientResponse,
        destination_path: Path,
        progress: Optional[ProgressReporter] = None,
    ) -> int:
        """
        Copies the response body to `destination_path`.

        Progress is reported each time more than `progress_step` bytes have
        arrived since the last report. If anything goes wrong after the file
        was opened, including cancellation, the partially written file is
        removed. The error is always re-raised.

        Returns:
            The number of bytes written.
        """
        bytes_downloaded = 0
        last_reported = 0
        opened = False
        try:
            async with aiofiles.open(destination_path, "wb") as f:
                opened = True
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    await f.write(chunk)
                    bytes_downloaded += len(chunk)
                    if progress and bytes_downloaded - last_reported > self.progress_step:
                        progress.update(destination_path, bytes_downloaded)
                        last_reported = bytes_downloaded
        except BaseException as e:
            log.debug(
                f"Download of '{escape(destination_path.name)}' failed: "
                f"{escape(repr(e))}"
            )
            if opened:
                try:
                    os.remove(destination_path)
                except OSError:
                    pass
            raise
        finally:
            if progress:
                progress.finish()

        return bytes_downloaded
