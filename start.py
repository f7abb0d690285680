#!/usr/bin/env python3
"""vcard-export — pick contacts and export them.  Run with:  python3 start.py [SOURCE...]"""
import sys
import os
from pathlib import Path

script_dir = os.path.dirname(os.path.abspath(__file__))
src_dir    = os.path.join(script_dir, "src")

sys.path.insert(0, src_dir)
os.environ["PYTHONPATH"] = src_dir + os.pathsep + os.environ.get("PYTHONPATH", "")
os.chdir(script_dir)

# ── First-run detection ───────────────────────────────────────────────────────
# Show a welcome message if no sources were given and cards-source/ is empty
def _first_run() -> bool:
    if len(sys.argv) > 1:
        return False
    source_dir = Path(script_dir) / "cards-source"
    if not source_dir.is_dir():
        return True
    return not any(p.suffix.lower() in (".vcf", ".csv", ".db", ".sqlite") for p in source_dir.iterdir())

def _welcome() -> None:
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console()
    console.print()
    console.print(Panel(
        Text.from_markup(
            "[bold #4d9fff]Welcome to vcard-export[/]\n\n"
            "There are just [bold]two folders[/] you need to know about:\n\n"
            "  [bold #4d9fff]cards-source/[/]  Drop your contact sources here\n"
            "  [dim]           a .vcf export, a name,number .csv, or an Android contacts2.db[/]\n\n"
            "  [bold #3ecf8e]cards-export/[/]  contacts.vcf or contacts1.vcf, contacts2.vcf, … appear here\n\n"
            "[dim]Tick the contacts you want, then choose [bold]e[/] or [bold]b[/] to export.[/]"
        ),
        title=Text("  Getting Started  ", style="dim #546075"),
        title_align="left",
        border_style="#2a3347",
        padding=(1, 2),
    ))
    console.print()
    console.input("[dim #546075]  Press Enter to continue…[/dim #546075]")

if _first_run():
    _welcome()

from vcard_exporter.cli import app
app(["pick", *sys.argv[1:]])
