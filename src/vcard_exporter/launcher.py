from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.text import Text

from .batching import DEFAULT_BATCH_SIZE
from .errors import ExportWriteError
from .exporter import write_batches, write_single
from .model import Contact
from .report import contacts_table, print_export_summary
from .selection import SelectionState
from .share import ConsoleShareDispatcher, ShareDispatcher, ShareRequest

logger = logging.getLogger(__name__)

console = Console()


def export_and_share(
    contacts: list[Contact],
    export_dir: Path,
    dispatcher: ShareDispatcher | None,
    batch: bool = False,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[Path]:
    """Write the given contacts and hand the resulting file(s) to the dispatcher.

    Single mode always writes contacts.vcf (empty when nothing is selected);
    batch mode writes nothing for an empty selection and then shares nothing.
    """
    if batch:
        files = write_batches(contacts, export_dir, batch_size)
        request = ShareRequest.batches(files)
    else:
        files = [write_single(contacts, export_dir)]
        request = ShareRequest.single(files[0])

    logger.info("Exported %d contact(s) to %d file(s)", len(contacts), len(files))
    if dispatcher is not None and files:
        dispatcher.dispatch(request)
    return files


def _header(selection: SelectionState) -> None:
    title = Text()
    title.append("Export Contacts", style="bold cyan")
    title.append(f"    {selection.selected_count()} / {selection.total} selected", style="dim")
    console.print(Panel.fit(title, border_style="bright_black", padding=(0, 2)))


def _menu(selection: SelectionState) -> None:
    console.print(Text("\nChoose an option:", style="bold"))
    console.print("  <n>) Tick / untick contact n (several: 1,4,7)")
    console.print(f"  a) {selection.toggle_all_label()}")
    console.print("  e) Export All")
    console.print("  b) Export in Batches")
    console.print("\n  q) Quit\n")


def _parse_indices(choice: str) -> list[int] | None:
    parts = [p.strip() for p in choice.split(",") if p.strip()]
    if not parts or not all(p.isdecimal() for p in parts):
        return None
    return [int(p) for p in parts]


# Outcomes of one menu choice
QUIT = "quit"
REDRAW = "redraw"
PAUSE = "pause"     # something was printed; wait before the screen is cleared


def handle_choice(
    choice: str,
    contacts: list[Contact],
    selection: SelectionState,
    export_dir: Path,
    dispatcher: ShareDispatcher | None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> str:
    """Apply one menu choice and return QUIT, REDRAW or PAUSE."""
    choice = choice.strip().lower()
    if choice in {"q", "quit"}:
        return QUIT

    if choice == "a":
        selection.toggle_all()
        return REDRAW

    if choice in {"e", "b"}:
        chosen = selection.selected_contacts(contacts)
        batch = choice == "b"
        try:
            files = export_and_share(chosen, export_dir, dispatcher, batch=batch, batch_size=batch_size)
        except ExportWriteError as exc:
            console.print(f"[bold red]Export failed:[/bold red] {exc}")
            return PAUSE
        print_export_summary(
            files=files,
            contact_count=len(chosen),
            mode="batches" if batch else "single file",
            out=console,
        )
        return PAUSE

    indices = _parse_indices(choice)
    if indices is None:
        console.print("[red]Unknown option[/red]")
        return PAUSE
    outcome = REDRAW
    for idx in indices:
        try:
            selection.toggle(idx)
        except IndexError:
            console.print(f"[red]No contact #{idx}[/red]")
            outcome = PAUSE
    return outcome


def main(
    contacts: list[Contact],
    export_dir: Path,
    dispatcher: ShareDispatcher | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> None:
    dispatcher = dispatcher or ConsoleShareDispatcher(console)
    selection = SelectionState(len(contacts))

    while True:
        console.clear()
        _header(selection)
        if contacts:
            console.print(contacts_table(contacts, selection))
        else:
            console.print("[dim]No contacts with a phone number were found.[/dim]")
        _menu(selection)

        choice = Prompt.ask("Option", default="q")
        outcome = handle_choice(choice, contacts, selection, export_dir, dispatcher, batch_size)
        if outcome == QUIT:
            break
        if outcome == PAUSE and not Confirm.ask("\nReturn to list?", default=True):
            break
