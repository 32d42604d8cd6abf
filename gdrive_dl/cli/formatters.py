"""
Functions for formatting and displaying results in the console using Rich.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gdrive_dl.models.session import Session
from gdrive_dl.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: Optional[dict] = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "SharingDisabledError": [
            "• Ask the owner to share the item with 'Anyone with the link'.",
            "• Check that the link was copied completely.",
        ],
        "QuotaExceededError": [
            "• Too many people downloaded this file recently.",
            "• Try again in 24 hours, or ask the owner for a copy.",
        ],
        "UnresolvableIdError": [
            "• Pass a file, folder, open?id= or uc?id= link, or a bare ID.",
        ],
        "UnrecognizedUrlError": [
            "• Only files and folders can be downloaded.",
            "• Google Docs, Sheets and Slides need to be exported by their owner.",
        ],
        "ConfirmationError": [
            "• Drive kept asking to confirm the download.",
            "• Run with -v to see the page that was returned.",
        ],
        "TooManyRedirectsError": [
            "• Drive is redirecting in a loop; try again later.",
        ],
        "ConfigurationError": [
            "• Check the values in your config.ini file.",
        ],
        "DownloadError": [
            "• Check your internet connection and free disk space.",
            "• Use -e to continue with the remaining items after a failure.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -d for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_summary_panel(
    session: Session, duration: float, console: Optional[Console] = None
) -> None:
    """Displays the totals of a finished run and any recorded errors."""
    console = console or Console()
    stats = session.stats

    table = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column(justify="right")
    table.add_row("Files downloaded", f"[green]{stats.files_downloaded}[/green]")
    table.add_row("Files skipped", f"[yellow]{stats.files_skipped}[/yellow]")
    table.add_row("Folders", str(stats.folders_processed))
    table.add_row("Total size", format_size(stats.bytes_downloaded))
    table.add_row("Duration", format_duration(duration))
    error_style = "red" if session.errors else "green"
    table.add_row("Errors", f"[{error_style}]{len(session.errors)}[/{error_style}]")

    console.print(
        Panel(
            table,
            title="[bold]Download Summary[/bold]",
            border_style="red" if session.errors else "green",
            expand=False,
        )
    )
    for message in session.errors:
        console.print(f"  [red]✗[/red] {escape(message)}")
