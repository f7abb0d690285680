from __future__ import annotations

from pathlib import Path

from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .model import Contact
from .selection import SelectionState

console = Console()

# ── Palette ────────────────────────────────────────────────────────────────────
_ACCENT  = "#4d9fff"
_GREEN   = "#3ecf8e"
_TEXT    = "#c9d1e0"
_MID     = "#8896af"
_DIM     = "#546075"
_BORDER  = "#2a3347"


def _stat_panel(value: str, label: str, colour: str) -> Panel:
    body = Text()
    body.append(f"{value}\n", style=f"bold {colour}")
    body.append(label, style=f"dim {_DIM}")
    return Panel(body, border_style=_BORDER, padding=(0, 2), expand=True)


def contacts_table(
    contacts: list[Contact],
    selection: SelectionState | None = None,
    title: str | None = None,
) -> Table:
    """Numbered contact list; with a selection, each row gets a checkbox."""
    table = Table(title=title, show_header=True, header_style="bold", box=None, padding=(0, 2))
    if selection is not None:
        table.add_column("", no_wrap=True)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Number")
    for idx, c in enumerate(contacts):
        row = [Text(str(idx)), Text(c.name), Text(c.number)]
        if selection is not None:
            row.insert(0, Text("[x]" if selection.is_selected(idx) else "[ ]"))
        table.add_row(*row)
    return table


def print_export_summary(
    *,
    files: list[Path],
    contact_count: int,
    mode: str,
    out: Console | None = None,
) -> None:
    out = out or console

    out.print()
    out.print(Text(f"  EXPORT SUMMARY  ({mode})", style=f"dim {_DIM}"))
    out.print()
    out.print(Columns([
        _stat_panel(str(contact_count), "contacts exported", _ACCENT),
        _stat_panel(str(len(files)),    "files written",     _TEXT),
    ], equal=True, expand=True))
    out.print()

    if not files:
        out.print(Text("  Nothing selected, no files written.", style=f"dim {_DIM}"))
        return

    body = Text()
    body.append("✓  Written successfully\n", style=f"bold {_GREEN}")
    body.append("\n".join(str(p) for p in files), style=f"dim {_MID}")
    out.print(Panel(body, border_style=_GREEN, padding=(0, 2)))
