from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .encoder import VCARD_MIME_TYPE
from .errors import ConfigError

SINGLE_TITLE = "Export Contacts"
BATCH_TITLE = "Export Contacts Batches"

console = Console()


@dataclass
class ShareRequest:
    files: list[Path]
    mime_type: str = VCARD_MIME_TYPE
    title: str = SINGLE_TITLE

    @classmethod
    def single(cls, path: Path) -> "ShareRequest":
        return cls(files=[path], title=SINGLE_TITLE)

    @classmethod
    def batches(cls, paths: list[Path]) -> "ShareRequest":
        return cls(files=list(paths), title=BATCH_TITLE)


class ShareDispatcher(Protocol):
    def dispatch(self, request: ShareRequest) -> None: ...


class ConsoleShareDispatcher:
    """Show the files to hand over, the way a share chooser would list them."""

    def __init__(self, out: Console | None = None):
        self.console = out or console

    def dispatch(self, request: ShareRequest) -> None:
        body = Text()
        for p in request.files:
            body.append(f"{p}\n", style="bold")
        body.append(request.mime_type, style="dim")
        self.console.print(Panel(body, title=request.title, title_align="left", border_style="cyan"))


class LocateShareDispatcher:
    """Reveal the exported file(s) in the system file manager."""

    def dispatch(self, request: ShareRequest) -> None:
        if not request.files:
            return
        # the file manager selects one entry; all batch files share a folder
        typer.launch(str(request.files[0]), locate=True)


DISPATCHERS = {
    "console": ConsoleShareDispatcher,
    "locate": LocateShareDispatcher,
}


def get_dispatcher(name: str) -> ShareDispatcher:
    try:
        return DISPATCHERS[name]()
    except KeyError:
        raise ConfigError(
            f"Unknown share target {name!r} (choose from: {', '.join(sorted(DISPATCHERS))})"
        ) from None
