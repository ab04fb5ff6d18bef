# src/credport/cli/console.py

import argparse
import logging
from pathlib import Path

import pyfiglet
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from credport.common import config
from credport.common.store import JsonFileStore

# Errors and progress go to stderr so stdout stays clean for piping exports
console = Console(stderr=True)


def display_banner() -> str:
    plain_banner = pyfiglet.figlet_format("credport", font="slant")
    console.print(
        Panel(
            plain_banner,
            title="[bold white] credport [/bold white]",
            subtitle=f"[cyan] v{config.APP_VERSION} [/cyan]",
            border_style="cyan",
            expand=False,
        )
    )
    return plain_banner


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help=f"Credential store file (default: ${config.VAULT_ENV_VAR} or ~/{config.CONFIG_DIR_NAME}/{config.DEFAULT_VAULT_FILE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def open_store(path: Path = None) -> JsonFileStore:
    return JsonFileStore(path or config.vault_path())
