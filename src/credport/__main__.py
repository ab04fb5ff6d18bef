# src/credport/__main__.py

import argparse
import sys

from credport.cli import exports as export_cli
from credport.cli import imports as import_cli
from credport.cli import sources as sources_cli
from credport.cli import wizard as wizard_cli


def main():
    parser = argparse.ArgumentParser(
        prog="credport",
        description="Move credentials between password managers, browsers and a local vault.",
        epilog="Use 'credport <command> --help' for more information on a specific command."
    )

    subparsers = parser.add_subparsers(
        title="Available Commands",
        dest="command",
        required=True,
        metavar="<command>"
    )
    subparsers.add_parser("sources", help="List the password managers and browsers that can be imported.")
    subparsers.add_parser(
        "import",
        help="Import an exported file into the vault.",
        description="Parse, validate and merge a vendor export into the local vault."
    )
    subparsers.add_parser(
        "export",
        help="Export the vault to CSV or JSON.",
        description="Serialise stored credentials to a portable CSV or JSON document."
    )
    subparsers.add_parser("wizard", help="Step-by-step interactive import and export.")

    # Only the command name is parsed here; each command parses sys.argv[2:] itself.
    args = parser.parse_args(sys.argv[1:2])

    if args.command == "sources":
        sources_cli.main()
    elif args.command == "import":
        import_cli.main()
    elif args.command == "export":
        export_cli.main()
    elif args.command == "wizard":
        wizard_cli.main()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
