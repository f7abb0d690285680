from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from . import launcher
from .config import ensure_workspace
from .errors import ConfigError, ContactSourceError, ExportWriteError, InvalidBatchSizeError
from .io import SOURCE_SUFFIXES, collect_sources, provider_for_path, read_contacts
from .model import Contact
from .report import contacts_table, print_export_summary
from .share import get_dispatcher

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="vcard-export: pick contacts and export them as vCard 3.0 files.",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ── Shared helpers ─────────────────────────────────────────────────────────────

def _load(sources: list[Path] | None, source_dir: Path) -> list[Contact]:
    """Resolve source files (default: everything in source_dir) and load contacts."""
    files = list(sources) if sources else collect_sources(source_dir)
    if not files:
        console.print(Panel(
            f"[bold red]No contact sources found in [white]{source_dir}/[/white][/bold red]\n\n"
            "Pass files explicitly or drop them here:\n"
            f"  [dim]{source_dir}/phone.vcf[/dim]\n"
            f"  [dim]{source_dir}/contacts.csv[/dim]   (name,number columns)\n"
            f"  [dim]{source_dir}/contacts2.db[/dim]   (Android contacts database)",
            title="Nothing to read",
            border_style="red",
        ))
        raise typer.Exit(code=2)

    try:
        providers = [provider_for_path(f) for f in files]
    except ContactSourceError as exc:
        console.print(f"[bold red]{exc}[/bold red] (supported: {', '.join(SOURCE_SUFFIXES)})")
        raise typer.Exit(code=2) from exc
    return read_contacts(providers)


def _parse_select(select: str, total: int) -> list[int]:
    indices: list[int] = []
    for part in select.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdecimal() or int(part) >= total:
            raise typer.BadParameter(
                f"{part!r} is not a contact index (0..{total - 1})", param_hint="--select"
            )
        indices.append(int(part))
    return sorted(set(indices))


# ── `list` command ─────────────────────────────────────────────────────────────

@app.command("list")
def list_contacts(
    sources: list[Path] | None = typer.Argument(None, help="Contact sources (.vcf, .csv, .db)"),
    count: bool = typer.Option(False, "--count", help="Only print the number of contacts"),
) -> None:
    """Show the deduplicated contact list with the indices used by --select."""
    paths, _ = ensure_workspace()
    contacts = _load(sources, paths.source_dir)
    if count:
        console.print(len(contacts))
        return
    if not contacts:
        console.print("[dim]No contacts with a phone number were found.[/dim]")
        return
    console.print(contacts_table(contacts, title=f"{len(contacts)} contact(s)"))


# ── `export` command ───────────────────────────────────────────────────────────

@app.command()
def export(
    sources: list[Path] | None = typer.Argument(None, help="Contact sources (.vcf, .csv, .db)"),
    select: str | None = typer.Option(None, "--select", "-s", help="Comma-separated contact indices, e.g. 0,2,5"),
    all_: bool = typer.Option(False, "--all", "-a", help="Export every contact (the default)"),
    batch: bool = typer.Option(False, "--batch", "-b", help="Write contacts1.vcf, contacts2.vcf, ..."),
    batch_size: int | None = typer.Option(None, "--batch-size", help="Contacts per batch file. Falls back to local/export.conf."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Export directory. Falls back to local/export.conf."),
    share: str | None = typer.Option(None, "--share", help="Share target: console or locate"),
    no_share: bool = typer.Option(False, "--no-share", help="Only write the files"),
) -> None:
    """Export selected contacts as one contacts.vcf or as numbered batch files."""
    paths, settings = ensure_workspace()
    if select is not None and all_:
        raise typer.BadParameter("use either --select or --all, not both", param_hint="--select")

    effective_batch_size = batch_size if batch_size is not None else settings.batch_size
    export_dir = output or paths.export_dir

    dispatcher = None
    if not no_share:
        try:
            dispatcher = get_dispatcher(share or settings.share)
        except ConfigError as exc:
            console.print(f"[bold red]{exc}[/bold red]")
            raise typer.Exit(code=2) from exc

    contacts = _load(sources, paths.source_dir)
    if select is not None:
        chosen = [contacts[i] for i in _parse_select(select, len(contacts))]
    else:
        chosen = contacts

    try:
        files = launcher.export_and_share(
            chosen, export_dir, dispatcher, batch=batch, batch_size=effective_batch_size
        )
    except InvalidBatchSizeError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2) from exc
    except ExportWriteError as exc:
        console.print(f"[bold red]Export failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    print_export_summary(
        files=files,
        contact_count=len(chosen),
        mode="batches" if batch else "single file",
        out=console,
    )


# ── `pick` command ─────────────────────────────────────────────────────────────

@app.command()
def pick(
    sources: list[Path] | None = typer.Argument(None, help="Contact sources (.vcf, .csv, .db)"),
) -> None:
    """Tick contacts on an interactive list, then export them."""
    paths, settings = ensure_workspace()
    try:
        dispatcher = get_dispatcher(settings.share)
    except ConfigError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2) from exc
    contacts = _load(sources, paths.source_dir)
    launcher.main(contacts, paths.export_dir, dispatcher, settings.batch_size)


if __name__ == "__main__":
    app()
