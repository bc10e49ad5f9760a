"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cookbook_cli.models.config import ClientConfig
from cookbook_cli.models.stats import DownloadStats
from cookbook_cli.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `cookbook-cli init <SERVER_URL>` to create a configuration.",
            "• Run `cookbook-cli validate` to check the current settings.",
        ],
        "ClientResponseError": [
            "• Check the cookbook name and version exist on the server.",
            "• A 401/403 status means the server rejected the client identity.",
            "• Use 'latest' (or omit the version) to fetch the newest version.",
        ],
        "ClientConnectorError": [
            "• Check the server URL in your configuration.",
            "• Check your network connection and any proxy settings.",
        ],
        "InvalidURL": [
            "• The server URL or a file URL in the manifest is malformed.",
        ],
        "TimeoutError": [
            "• The server did not answer in time.",
            "• Increase `request_timeout` in the configuration.",
        ],
        "PermissionError": [
            "• The destination directory is not writable.",
            "• Choose another directory with `--dir`.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        content += f"{key} = {escape(str(value))}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{escape(str(config_path))}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: ClientConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Server URL:", f"[green]{escape(config.server_url)}[/green]")
    table.add_row("Client Name:", escape(config.client_name) or "[dim]not set[/dim]")
    table.add_row("Chef Version:", escape(config.chef_version))
    table.add_row("Max Workers:", str(config.max_workers))
    table.add_row("Request Timeout:", f"{config.request_timeout:g}s")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_summary_panel(stats: DownloadStats, cookbook_path: Path):
    """Displays the final summary of a cookbook download."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Files:", f"[bold green]{stats.files_downloaded}[/bold green]"
    )
    stats_table.add_row(
        "Categories:",
        ", ".join(stats.categories_downloaded) or "[dim]none[/dim]",
    )
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.bytes_downloaded)}[/cyan]"
    )
    stats_table.add_row(
        "Time Elapsed:",
        f"[blue]{format_duration(stats.duration_seconds)}[/blue]",
    )
    stats_table.add_row("Location:", f"[dim]{escape(str(cookbook_path))}[/dim]")

    console.print()
    console.print(
        Panel(
            stats_table,
            title="[bold]Download Complete![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
