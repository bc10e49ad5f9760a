"""
Main entry point for the cookbook-cli application.
"""

import logging
import sys

from rich.console import Console

from cookbook_cli.cli.app import app
from cookbook_cli.cli.formatters import format_error_with_suggestions
from cookbook_cli.exceptions import CookbookCliError

log = logging.getLogger("cookbook_cli")


def main() -> None:
    """Runs the CLI and turns errors that escape a command into an exit code."""
    console = Console()
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Download cancelled.[/yellow]")
        sys.exit(130)
    except CookbookCliError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
