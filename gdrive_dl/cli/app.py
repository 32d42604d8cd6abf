"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gdrive_dl import __version__
from gdrive_dl.core.retriever import Retriever
from gdrive_dl.exceptions import GDriveDLError
from gdrive_dl.models.session import Session
from gdrive_dl.storage.config_manager import ConfigManager, get_config_dir

from .formatters import format_error_with_suggestions, print_summary_panel
from .progress import ProgressReporter

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("gdrive_dl")

app = typer.Typer(
    name="gdrive-dl",
    help="Download publicly shared Google Drive files and folders.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]gdrive-dl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


def _set_log_level(debug: bool, quiet: bool) -> None:
    if debug:
        log.setLevel("DEBUG")
    elif quiet:
        log.setLevel("WARNING")
    else:
        log.setLevel("INFO")


def read_url_file(path: Path) -> list[str]:
    """Reads URLs from a text file, one per line, skipping blanks and comments."""
    with open(path, "r", encoding="utf-8") as f:
        return [
            line.strip()
            for line in f
            if line.strip() and not line.strip().startswith("#")
        ]


@app.command()
def download(
    urls: Optional[list[str]] = typer.Argument(  # noqa: B008
        None, help="Drive file/folder URLs or bare IDs."
    ),
    directory_prefix: Optional[str] = typer.Option(
        None, "-P", "--directory-prefix", help="Output directory (default: .)."
    ),
    output_document: Optional[str] = typer.Option(
        None,
        "-O",
        "--output-document",
        help="Output filename. Only valid for a single file URL; implies --overwrite.",
    ),
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Download files even if they already exist."
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Disable console output."),
    mtimes: bool = typer.Option(
        False,
        "-m",
        "--mtimes",
        help="Use modified times to check for changed files and set them on disk.",
    ),
    debug: bool = typer.Option(False, "-d", "--debug", help="Debug level logging."),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Debug logging with HTML pages and HTTP headers."
    ),
    continue_on_errors: bool = typer.Option(
        False, "-e", "--continue-on-errors", help="Continue on errors."
    ),
    urlfile: Optional[Path] = typer.Option(
        None, "-f", "--urlfile", help="Text file containing URLs, one per line."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_callback,
    ),
):
    """Download Google Drive files and folders shared by link."""
    _set_log_level(debug or verbose, quiet)

    collected = list(urls or [])
    if urlfile:
        try:
            collected.extend(read_url_file(urlfile))
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"[red]Failed to read URL file: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e

    if not collected:
        log.error("[red]✗ No URLs provided.[/red]")
        raise typer.Exit(code=1)

    if output_document and len(collected) > 1:
        log.warning(
            "[yellow]Ignoring --output-document option for multiple url download[/yellow]"
        )
        output_document = None

    cli_options = {
        "source_urls": collected,
        "directory_prefix": directory_prefix,
        "output_document": output_document,
        "overwrite": True if overwrite or output_document else None,
        "quiet": quiet or None,
        "mtimes": mtimes or None,
        "verbose": verbose or None,
        "continue_on_errors": continue_on_errors or None,
    }

    async def _download_async() -> Session:
        progress = ProgressReporter(console=console, quiet=config.quiet)
        async with Retriever(config, progress=progress) as retriever:
            return await retriever.run()

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        _set_log_level(debug or config.verbose, config.quiet)
        session = asyncio.run(_download_async())
    except GDriveDLError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    if not config.quiet:
        print_summary_panel(session, session.stats.elapsed(), console)
    if session.errors:
        raise typer.Exit(code=1)
