"""Exception hierarchy for vcard-export."""
from __future__ import annotations

from pathlib import Path


class VcardExportError(Exception):
    """Base exception for all vcard-export errors."""


# Sources
class ContactSourceError(VcardExportError):
    """A contact provider could not be opened or read."""


class ContactPermissionError(ContactSourceError):
    """Read access to a contact provider was denied."""


# Export
class InvalidBatchSizeError(VcardExportError, ValueError):
    """Batch size is not a positive integer."""


class ExportWriteError(VcardExportError):
    """Writing one export file failed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


# Config
class ConfigError(VcardExportError):
    """Invalid configuration value."""
