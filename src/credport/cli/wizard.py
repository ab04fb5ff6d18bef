# src/credport/cli/wizard.py
"""
Interactive import/export walkthrough.

Navigation is a small state machine: every (state, action) pair that is not in
TRANSITIONS raises InvalidTransitionError, so the prompt loop can never end up
in a step it has no screen for.
"""

import argparse
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from rich.prompt import Confirm, Prompt

from credport.common.errors import CredportError, InvalidTransitionError
from credport.common.exporter import CredentialExporter, default_export_filename, write_export
from credport.common.models import ExportOptions, ImportOptions, SELECTABLE_EXPORT_FORMATS
from credport.common.sources import list_sources
from credport.common.store import CredentialStore
from credport.pipeline.service import ImportPreview, prepare_import
from .console import add_common_arguments, console, display_banner, open_store, setup_logging
from .imports import render_outcome, render_preview


class WizardState(str, Enum):
    CHOICE = "choice"
    SOURCE_SELECT = "source_select"
    FILE_SELECT = "file_select"
    PREVIEW = "preview"
    IMPORT_DONE = "import_done"
    EXPORT_OPTIONS = "export_options"
    EXPORT_DONE = "export_done"


class WizardAction(str, Enum):
    START_IMPORT = "start_import"
    START_EXPORT = "start_export"
    SELECT_SOURCE = "select_source"
    LOAD_FILE = "load_file"
    CONFIRM = "confirm"
    EXPORT = "export"
    BACK = "back"
    RESTART = "restart"


TRANSITIONS: Dict[Tuple[WizardState, WizardAction], WizardState] = {
    (WizardState.CHOICE, WizardAction.START_IMPORT): WizardState.SOURCE_SELECT,
    (WizardState.CHOICE, WizardAction.START_EXPORT): WizardState.EXPORT_OPTIONS,
    (WizardState.SOURCE_SELECT, WizardAction.SELECT_SOURCE): WizardState.FILE_SELECT,
    (WizardState.SOURCE_SELECT, WizardAction.BACK): WizardState.CHOICE,
    (WizardState.FILE_SELECT, WizardAction.LOAD_FILE): WizardState.PREVIEW,
    (WizardState.FILE_SELECT, WizardAction.BACK): WizardState.SOURCE_SELECT,
    (WizardState.PREVIEW, WizardAction.CONFIRM): WizardState.IMPORT_DONE,
    (WizardState.PREVIEW, WizardAction.BACK): WizardState.FILE_SELECT,
    (WizardState.IMPORT_DONE, WizardAction.RESTART): WizardState.CHOICE,
    (WizardState.EXPORT_OPTIONS, WizardAction.EXPORT): WizardState.EXPORT_DONE,
    (WizardState.EXPORT_OPTIONS, WizardAction.BACK): WizardState.CHOICE,
    (WizardState.EXPORT_DONE, WizardAction.RESTART): WizardState.CHOICE,
}

TERMINAL_STATES = frozenset({WizardState.IMPORT_DONE, WizardState.EXPORT_DONE})


class Wizard:
    """Current step plus whatever the earlier steps picked."""

    def __init__(self):
        self.state = WizardState.CHOICE
        self.source_id: Optional[str] = None
        self.preview: Optional[ImportPreview] = None

    def allowed_actions(self):
        return [action for (state, action) in TRANSITIONS if state == self.state]

    def dispatch(self, action: WizardAction) -> WizardState:
        try:
            target = TRANSITIONS[(self.state, WizardAction(action))]
        except (KeyError, ValueError):
            name = getattr(action, "value", action)
            raise InvalidTransitionError(f"Cannot '{name}' from step '{self.state.value}'") from None

        if target == WizardState.CHOICE:
            self.source_id = None
        if target in (WizardState.CHOICE, WizardState.SOURCE_SELECT, WizardState.FILE_SELECT):
            self.preview = None

        self.state = target
        return target

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES


def _ask_source(wizard: Wizard) -> None:
    sources = list_sources(include_generic=True)
    for number, source in enumerate(sources, 1):
        console.print(f"  [cyan]{number}[/cyan]. {source.icon} {source.name} "
                      f"[dim]({', '.join(sorted(source.supported_extensions))})[/dim]")
    choices = [str(n) for n in range(1, len(sources) + 1)] + ["b"]
    answer = Prompt.ask("Source number, or b to go back", choices=choices, show_choices=False)
    if answer == "b":
        wizard.dispatch(WizardAction.BACK)
        return
    wizard.source_id = sources[int(answer) - 1].id
    wizard.dispatch(WizardAction.SELECT_SOURCE)


def _ask_file(wizard: Wizard, store: CredentialStore) -> None:
    answer = Prompt.ask("Path to the exported file (empty to go back)", default="", show_default=False)
    if not answer:
        wizard.dispatch(WizardAction.BACK)
        return
    path = Path(answer).expanduser()
    if not path.is_file():
        console.print(f"[bold red]Error:[/] File {path} not found.")
        return

    options = ImportOptions(
        skip_duplicates=Confirm.ask("Skip entries that already exist?", default=True),
        update_existing=Confirm.ask("Update existing entries instead?", default=False),
        import_notes=Confirm.ask("Import notes?", default=True),
    )
    try:
        with console.status("[bold green]Reading export..."):
            wizard.preview = prepare_import(
                path.read_bytes(), wizard.source_id, path.suffix, store.list_all(), options
            )
    except CredportError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        return
    wizard.dispatch(WizardAction.LOAD_FILE)


def _confirm_import(wizard: Wizard, store: CredentialStore) -> None:
    render_preview(wizard.preview)
    if not Confirm.ask(f"Import {wizard.preview.plan.total} entries?", default=True):
        wizard.dispatch(WizardAction.BACK)
        return
    render_outcome(wizard.preview.apply(store))
    wizard.dispatch(WizardAction.CONFIRM)


def _ask_export(wizard: Wizard, store: CredentialStore) -> None:
    fmt = Prompt.ask("Format", choices=[f.value for f in SELECTABLE_EXPORT_FORMATS] + ["back"], default="csv")
    if fmt == "back":
        wizard.dispatch(WizardAction.BACK)
        return
    options = ExportOptions(format=fmt, include_metadata=Confirm.ask("Include metadata?", default=False))
    output = Path(Prompt.ask("Save to", default=default_export_filename(fmt))).expanduser()
    if output.exists() and not Confirm.ask(f"{output} already exists. Overwrite?", default=False):
        return
    try:
        write_export(CredentialExporter().export(store.list_all(), options), output)
    except (CredportError, OSError) as e:
        console.print(f"[bold red]✗ Export failed:[/bold red] {e}")
        return
    console.print(f"[bold green]✓ Export Success:[/] [magenta]{output}[/]")
    wizard.dispatch(WizardAction.EXPORT)


def run(store: CredentialStore, wizard: Optional[Wizard] = None) -> Wizard:
    wizard = wizard or Wizard()
    while True:
        if wizard.state == WizardState.CHOICE:
            answer = Prompt.ask("What would you like to do?", choices=["import", "export", "quit"], default="import")
            if answer == "quit":
                return wizard
            wizard.dispatch(WizardAction.START_IMPORT if answer == "import" else WizardAction.START_EXPORT)
        elif wizard.state == WizardState.SOURCE_SELECT:
            _ask_source(wizard)
        elif wizard.state == WizardState.FILE_SELECT:
            _ask_file(wizard, store)
        elif wizard.state == WizardState.PREVIEW:
            _confirm_import(wizard, store)
        elif wizard.state == WizardState.EXPORT_OPTIONS:
            _ask_export(wizard, store)
        elif wizard.finished:
            if not Confirm.ask("Start over?", default=False):
                return wizard
            wizard.dispatch(WizardAction.RESTART)


def main():
    parser = argparse.ArgumentParser(prog="credport wizard", description="Step-by-step import and export.")
    add_common_arguments(parser)
    args = parser.parse_args(sys.argv[2:])
    setup_logging(args.verbose)

    display_banner()
    try:
        run(open_store(args.vault))
    except CredportError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled. Nothing further was written.[/yellow]")
        sys.exit(130)
