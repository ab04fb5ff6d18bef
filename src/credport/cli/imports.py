# src/credport/cli/imports.py

import argparse
import sys
from pathlib import Path
from typing import List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from credport.common.errors import CredportError
from credport.common.models import ImportOptions, ImportOutcome
from credport.common.sources import list_sources
from credport.pipeline.service import ImportPreview, prepare_import
from .console import add_common_arguments, console, open_store, setup_logging

PREVIEW_ROWS = 10
SHOWN_WARNINGS = 5


def _setup_arg_parser() -> argparse.ArgumentParser:
    source_ids = [s.id for s in list_sources(include_generic=True)]
    parser = argparse.ArgumentParser(
        prog="credport import",
        description="Import credentials exported from another password manager or browser.",
    )
    parser.add_argument("input_file", type=Path, help="Exported file (.csv, .json, .1pux, .xml)")
    parser.add_argument("-s", "--source", choices=source_ids, required=True, help="Where the file comes from")
    parser.add_argument("--update-existing", action="store_true",
                        help="Overwrite stored credentials with the same site and username")
    parser.add_argument("--allow-duplicates", action="store_true",
                        help="Insert entries that already exist instead of skipping them")
    parser.add_argument("--no-validate-urls", action="store_true", help="Do not warn about malformed URLs")
    parser.add_argument("--no-notes", action="store_true", help="Drop notes from imported entries")
    parser.add_argument("--preview", action="store_true", help="Show what would be imported without saving")
    add_common_arguments(parser)
    return parser


def options_from_args(args) -> ImportOptions:
    return ImportOptions(
        skip_duplicates=not args.allow_duplicates,
        update_existing=args.update_existing,
        validate_urls=not args.no_validate_urls,
        import_notes=not args.no_notes,
    )


def render_warnings(warnings: List[str]) -> None:
    if not warnings:
        return
    lines = Text()
    for warning in warnings[:SHOWN_WARNINGS]:
        lines.append(f"• {warning}\n")
    if len(warnings) > SHOWN_WARNINGS:
        lines.append(f"• ... and {len(warnings) - SHOWN_WARNINGS} more\n")
    console.print(Panel(lines, title=f"{len(warnings)} warnings", border_style="yellow"))


def render_preview(preview: ImportPreview) -> None:
    table = Table(
        title=f"Found [bold green]{len(preview.candidates)}[/bold green] entries, "
              f"[bold green]{len(preview.valid)}[/bold green] valid",
        border_style="cyan",
        header_style="bold magenta",
    )
    table.add_column("Site", style="cyan", no_wrap=True)
    table.add_column("Username", style="green")
    table.add_column("Folder", style="dim")
    for credential in preview.valid[:PREVIEW_ROWS]:
        table.add_row(credential.site, credential.username, credential.folder or "")
    console.print(table)
    if len(preview.valid) > PREVIEW_ROWS:
        console.print(f"[dim]... and {len(preview.valid) - PREVIEW_ROWS} more entries[/dim]")

    plan = preview.plan
    console.print(
        f"Plan: [green]{len(plan.to_insert)} new[/green], "
        f"[cyan]{len(plan.to_update)} updates[/cyan], "
        f"[yellow]{len(plan.to_skip)} skipped[/yellow]"
    )
    render_warnings(preview.warnings)


def render_outcome(outcome: ImportOutcome) -> None:
    summary = Text()
    summary.append(f"✓ Imported: {outcome.imported_count}\n")
    summary.append(f"↷ Skipped: {outcome.skipped_count}\n")
    if outcome.duplicates:
        summary.append(f"≡ Duplicates found: {len(outcome.duplicates)}\n")
    style = "green" if outcome.success and not outcome.errors else "red"
    console.print(Panel(summary, title="Import finished", border_style=style))
    for error in outcome.errors:
        console.print(f"[bold red]✗[/bold red] {error}")


def main():
    parser = _setup_arg_parser()
    # Dispatched from `credport import ...`
    args = parser.parse_args(sys.argv[2:])
    setup_logging(args.verbose)

    if not args.input_file.exists():
        console.print(f"[bold red]Error:[/] File {args.input_file} not found.")
        sys.exit(1)

    try:
        options = options_from_args(args)
        store = open_store(args.vault)
        content = args.input_file.read_bytes()
        with console.status("[bold green]Reading export..."):
            preview = prepare_import(content, args.source, args.input_file.suffix, store.list_all(), options)

        render_preview(preview)
        if args.preview:
            return

        outcome = preview.apply(store)
        render_outcome(outcome)
    except CredportError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
