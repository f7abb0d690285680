from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .batching import DEFAULT_BATCH_SIZE, partition
from .encoder import encode_many
from .errors import ExportWriteError
from .model import Contact

logger = logging.getLogger(__name__)

SINGLE_FILENAME = "contacts.vcf"


def batch_filename(index: int) -> str:
    """File name for the 1-indexed batch `index`."""
    return f"contacts{index}.vcf"


def _write(path: Path, contacts: Sequence[Contact]) -> Path:
    # newline="" keeps the \n terminators as-is on every platform
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(encode_many(contacts))
    except OSError as exc:
        raise ExportWriteError(path, exc.strerror or str(exc)) from exc
    logger.debug("Wrote %d contact(s) to %s", len(contacts), path)
    return path


def write_single(contacts: Sequence[Contact], export_dir: Path) -> Path:
    """Write every contact to export_dir/contacts.vcf, replacing any previous export."""
    return _write(Path(export_dir) / SINGLE_FILENAME, contacts)


def write_batches(
    contacts: Sequence[Contact],
    export_dir: Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[Path]:
    """Write contacts1.vcf, contacts2.vcf, ... holding at most batch_size contacts each.

    Each file is written independently: if one write fails, files already
    written by this call stay on disk and the error propagates.
    """
    export_dir = Path(export_dir)
    files: list[Path] = []
    for index, chunk in enumerate(partition(contacts, batch_size), start=1):
        files.append(_write(export_dir / batch_filename(index), chunk))
    return files
