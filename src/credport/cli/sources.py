# src/credport/cli/sources.py

import argparse
import sys

from rich.table import Table

from credport.common.sources import list_sources
from .console import console


def render_sources(include_generic: bool = True) -> None:
    table = Table(title="Supported import sources", border_style="cyan", header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Formats")
    table.add_column("Description", style="dim")
    for source in list_sources(include_generic=include_generic):
        table.add_row(
            source.id,
            f"{source.icon} {source.name}".strip(),
            ", ".join(sorted(source.supported_extensions)),
            source.description,
        )
    console.print(table)


def main():
    parser = argparse.ArgumentParser(prog="credport sources", description="List supported import sources.")
    parser.add_argument("--vendors-only", action="store_true", help="Hide the generic CSV/JSON source")
    args = parser.parse_args(sys.argv[2:])
    render_sources(include_generic=not args.vendors_only)
