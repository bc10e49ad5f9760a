"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiohttp
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cookbook_cli import __version__
from cookbook_cli.api.client import ChefAPIClient
from cookbook_cli.core.download_manager import CookbookDownloader
from cookbook_cli.exceptions import ConfigurationError, CookbookCliError
from cookbook_cli.models.config import ClientConfig
from cookbook_cli.models.stats import DownloadStats
from cookbook_cli.storage.config_manager import ConfigManager
from cookbook_cli.utils.structured_logger import create_structured_logger

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_summary_panel,
    print_validation_table,
)

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
log = logging.getLogger("cookbook_cli")

app = typer.Typer(
    name="cookbook-cli",
    help=(
        "Download cookbooks from a Chef server. Use 'cookbook-cli <command>"
        " --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "cookbook-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Chef cookbook downloader CLI"""
    if version:
        console.print(f"[bold]cookbook-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("cookbook_cli").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]cookbook-cli init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    server_url: str = typer.Argument(
        ...,
        help="Chef server URL, including '/organizations/<org>' when used.",
    ),
    client_name: str = typer.Option(
        "", "--client-name", "-c", help="Client name sent as X-Ops-UserId."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Initialize the configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {"server_url": server_url, "client_name": client_name}
    try:
        ClientConfig(**settings, config_path=str(CONFIG_DIR))
    except ValidationError as e:
        console.print(f"[red]✗ Invalid settings:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.save_new_config(settings)
    console.print(
        f"\n[bold green]✓ Configuration saved to '{escape(str(CONFIG_FILE))}'"
        "[/bold green]"
    )
    console.print("Ready to download! Try: [cyan]cookbook-cli download <NAME>[/cyan]")


def _load_config(cli_options: dict) -> ClientConfig:
    """
    Loads the config file with CLI overrides. A --server-url on the command
    line is enough to run without a config file.
    """
    if "server_url" in cli_options and not CONFIG_FILE.is_file():
        try:
            return ClientConfig(**cli_options, config_path=str(CONFIG_DIR))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e
    return ConfigManager(CONFIG_FILE).load_config(cli_options)


@app.command(name="download")
def download_command(
    name: str = typer.Argument(..., help="Name of the cookbook."),
    version: str = typer.Argument(
        "latest", help="Cookbook version, or 'latest' for the newest one."
    ),
    directory: Path | None = typer.Option(
        None,
        "-d",
        "--dir",
        help="Directory to download into (default: current directory).",
    ),
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of simultaneous file transfers (default 1).",
    ),
    server_url: str | None = typer.Option(
        None, "--server-url", help="Override the configured Chef server URL."
    ),
    log_dir: Path | None = typer.Option(
        None, "--log-dir", help="Write a JSON-lines event log into this directory."
    ),
):
    """Download a cookbook version."""
    cli_options = {
        key: value
        for key, value in {
            "server_url": server_url,
            "max_workers": workers,
        }.items()
        if value is not None
    }

    try:
        config = _load_config(cli_options)
    except CookbookCliError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    structured_logger, events = create_structured_logger(
        log_dir=log_dir, enable_json=log_dir is not None
    )
    structured_logger.set_session_context(server_url=config.server_url)

    async def _download_async() -> tuple[Path, DownloadStats]:
        async with ChefAPIClient.from_config(config) as api_client:
            downloader = CookbookDownloader(
                api_client, max_workers=config.max_workers, events=events
            )
            if directory is None:
                cookbook_path = await downloader.download(name, version)
            else:
                cookbook_path = await downloader.download_at(name, version, directory)
            return cookbook_path, downloader.stats

    try:
        cookbook_path, stats = asyncio.run(_download_async())
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        console.print(
            format_error_with_suggestions(e, {"cookbook": name, "version": version})
        )
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e
    finally:
        structured_logger.close()

    print_summary_panel(stats, cookbook_path)


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except CookbookCliError as e:
        console.print(f"[red]✗ Configuration is invalid: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
