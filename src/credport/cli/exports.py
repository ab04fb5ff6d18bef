# src/credport/cli/exports.py

import argparse
import sys
from pathlib import Path

from credport.common.errors import CredportError
from credport.common.exporter import CredentialExporter, default_export_filename, write_export
from credport.common.models import ExportOptions, SELECTABLE_EXPORT_FORMATS
from .console import add_common_arguments, console, open_store, setup_logging


def _setup_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="credport export",
        description="Export stored credentials to CSV or JSON.",
    )
    parser.add_argument("-f", "--format", choices=[f.value for f in SELECTABLE_EXPORT_FORMATS], default="csv")
    parser.add_argument("-o", "--output", type=Path,
                        help="Destination file, '-' for stdout (default: credport-export-<date>.<format>)")
    parser.add_argument("--metadata", action="store_true", help="Include identifiers and creation dates")
    parser.add_argument("--ids", nargs="+", metavar="ID", help="Only export these credential ids")
    parser.add_argument("-y", "--force", action="store_true", help="Overwrite an existing output file")
    add_common_arguments(parser)
    return parser


def main():
    parser = _setup_arg_parser()
    args = parser.parse_args(sys.argv[2:])
    setup_logging(args.verbose)

    output = args.output or Path(default_export_filename(args.format))
    to_stdout = str(output) == "-"
    if not to_stdout and output.exists() and not args.force:
        console.print(f"[bold red]Error:[/] {output} already exists, use -y to overwrite.")
        sys.exit(1)

    options = ExportOptions(
        format=args.format,
        include_metadata=args.metadata,
        selected_ids=frozenset(args.ids) if args.ids else None,
    )
    try:
        records = open_store(args.vault).list_all()
        document = CredentialExporter().export(records, options)
        if to_stdout:
            sys.stdout.write(document)
            return
        write_export(document, output)
    except (CredportError, OSError) as e:
        console.print(f"[bold red]✗ Export failed:[/bold red] {e}")
        sys.exit(1)

    console.print(f"[bold green]✓ Export Success:[/] [magenta]{output}[/]")
    console.print("[yellow]The export file contains plaintext passwords. Store it safely.[/yellow]")
