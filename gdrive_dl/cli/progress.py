"""
Coarse, single-line download progress for the console.
"""

from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, TaskID, TextColumn

from gdrive_dl.utils.formatting import format_megabytes


class ProgressReporter:
    """
    Shows one transient progress line with the cumulative size of the file
    being downloaded. Prints nothing in quiet mode.
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def _start(self, path: Union[str, Path]) -> None:
        self._progress = Progress(
            TextColumn("{task.description}"),
            TextColumn("[cyan]{task.fields[size]}"),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(
            escape(str(path)), total=None, size=format_megabytes(0)
        )

    def update(self, path: Union[str, Path], downloaded: int) -> None:
        if self.quiet:
            return
        if self._progress is None:
            self._start(path)
        self._progress.update(
            self._task_id,
            completed=downloaded,
            size=format_megabytes(downloaded),
            refresh=True,
        )

    def finish(self) -> None:
        """Removes the progress line, if one was started."""
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None
