from __future__ import annotations

import csv
import logging
import re
import sqlite3
from io import StringIO
from pathlib import Path
from typing import Iterable, Iterator, Protocol

import vobject

from .errors import ContactPermissionError, ContactSourceError
from .model import UNKNOWN_NAME, Contact, RawRow

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".vcf", ".csv", ".db", ".sqlite")

_WHITESPACE = re.compile(r"\s")
_LINE_BREAK = re.compile(r"\r\n|[\r\n]")


# ── Normalisation + dedup ──────────────────────────────────────────────────────

def normalize_name(raw: str | None) -> str:
    # a line break would split the FN line of the written record
    if raw is None:
        return UNKNOWN_NAME
    return _LINE_BREAK.sub(" ", raw).strip()


def normalize_number(raw: str | None) -> str:
    if raw is None:
        return ""
    return _WHITESPACE.sub("", raw)


def load_contacts(rows: Iterable[RawRow]) -> list[Contact]:
    """Normalise provider rows into unique contacts.

    Rows whose number is empty after normalisation are dropped. Rows that
    normalise to the same (name, number) pair collapse into one contact, kept
    at the position where the pair was first seen.
    """
    seen: dict[tuple[str, str], Contact] = {}
    dropped = 0
    for raw_name, raw_number in rows:
        number = normalize_number(raw_number)
        if not number:
            dropped += 1
            continue
        key = (normalize_name(raw_name), number)
        if key not in seen:
            seen[key] = Contact(*key)
    if dropped:
        logger.debug("%d row(s) without a phone number dropped", dropped)
    return list(seen.values())


# ── Providers ──────────────────────────────────────────────────────────────────
#
# A provider is anything with a `label` and a `rows()` iterator of
# (name, number) pairs. Providers only read; they raise ContactSourceError
# (or ContactPermissionError) when the source cannot be opened.

class ContactProvider(Protocol):
    label: str

    def rows(self) -> Iterator[RawRow]: ...


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except PermissionError as exc:
        raise ContactPermissionError(f"Permission denied reading {path}") from exc
    except OSError as exc:
        raise ContactSourceError(f"Cannot open {path}: {exc}") from exc


# Lines vobject's parser chokes on in iCloud exports:
#   item1..TEL   double-dot group prefix  → strip prefix, keep property
#   item1.TEL    single-dot group prefix  → strip prefix, keep property
#   item1.X-*    Apple extension on group → drop line entirely
_ITEM_DOUBLE_DOT = re.compile(r"^item\d+\.\.", re.IGNORECASE)
_ITEM_SINGLE_STD = re.compile(r"^item\d+\.((?!X-)[A-Z])", re.IGNORECASE)
_ITEM_X_PROP     = re.compile(r"^item\d+\.X-", re.IGNORECASE)


def _sanitise_vcf(data: str, source_label: str) -> str:
    out: list[str] = []
    fixed = skipped = 0
    for line in data.splitlines(keepends=True):
        if _ITEM_X_PROP.match(line):
            skipped += 1
            continue
        if _ITEM_DOUBLE_DOT.match(line):
            line = _ITEM_DOUBLE_DOT.sub("", line)
            fixed += 1
        elif _ITEM_SINGLE_STD.match(line):
            line = _ITEM_SINGLE_STD.sub(r"\1", line)
            fixed += 1
        out.append(line)
    if skipped or fixed:
        logger.debug("%s: %d line(s) fixed, %d dropped", source_label, fixed, skipped)
    return "".join(out)


class VcfContactProvider:
    """One row per TEL of every VCARD in the given .vcf files."""

    def __init__(self, paths: Iterable[Path]):
        self.paths = [Path(p) for p in paths]
        self.label = ", ".join(p.name for p in self.paths)

    def rows(self) -> Iterator[RawRow]:
        for path in self.paths:
            data = _sanitise_vcf(_read_text(path), path.stem)
            try:
                components = list(vobject.readComponents(data, ignoreUnreadable=True))
            except vobject.base.ParseError as exc:
                raise ContactSourceError(f"{path.name}: unreadable vCard data ({exc})") from exc
            for vc in components:
                if vc.name.upper() != "VCARD":
                    continue
                fn = getattr(vc, "fn", None)
                name = str(fn.value) if fn is not None else None
                tels = getattr(vc, "tel_list", [])
                if not tels:
                    yield (name, None)
                for tel in tels:
                    yield (name, str(tel.value))


class CsvContactProvider:
    """One row per CSV record; blank cells count as missing."""

    def __init__(self, path: Path, name_column: str = "name", number_column: str = "number"):
        self.path = Path(path)
        self.name_column = name_column
        self.number_column = number_column
        self.label = self.path.name

    def rows(self) -> Iterator[RawRow]:
        text = _read_text(self.path)
        reader = csv.DictReader(StringIO(text.lstrip("\ufeff"), newline=""))
        try:
            fields = reader.fieldnames or []
            records = list(reader)
        except csv.Error as exc:
            raise ContactSourceError(f"{self.path.name}: malformed CSV ({exc})") from exc
        missing = [c for c in (self.name_column, self.number_column) if c not in fields]
        if missing:
            raise ContactSourceError(
                f"{self.path.name}: missing column(s) {', '.join(missing)}"
            )
        for record in records:
            name = record.get(self.name_column) or None
            number = record.get(self.number_column) or None
            yield (name, number)


_ANDROID_PHONE_QUERY = """
    SELECT rc.display_name, d.data1
    FROM data d
    JOIN mimetypes m ON m._id = d.mimetype_id
    JOIN raw_contacts rc ON rc._id = d.raw_contact_id
    WHERE m.mimetype = 'vnd.android.cursor.item/phone_v2'
    ORDER BY d._id
"""


class AndroidContactsDbProvider:
    """Phone rows from an Android contacts2.db snapshot, opened read-only."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.label = self.path.name

    def rows(self) -> Iterator[RawRow]:
        if not self.path.is_file():
            raise ContactSourceError(f"Contacts database not found at {self.path}")
        uri = self.path.resolve().as_uri() + "?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise ContactPermissionError(f"Cannot open {self.path}: {exc}") from exc
        try:
            try:
                results = conn.execute(_ANDROID_PHONE_QUERY).fetchall()
            except sqlite3.DatabaseError as exc:
                raise ContactSourceError(f"{self.path.name}: not a contacts database ({exc})") from exc
        finally:
            conn.close()
        for name, number in results:
            yield (name, number)


def provider_for_path(path: Path) -> ContactProvider:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".vcf":
        return VcfContactProvider([path])
    if suffix == ".csv":
        return CsvContactProvider(path)
    if suffix in (".db", ".sqlite"):
        return AndroidContactsDbProvider(path)
    raise ContactSourceError(f"Unsupported contact source: {path.name}")


# ── Public API ─────────────────────────────────────────────────────────────────

def read_contacts(providers: Iterable[ContactProvider]) -> list[Contact]:
    """Read every provider and return the deduplicated contact list.

    A provider that cannot be read contributes no rows; the failure is logged
    and the remaining providers are still read. The result may be empty.
    """
    rows: list[RawRow] = []
    for provider in providers:
        try:
            provider_rows = list(provider.rows())
        except ContactSourceError as exc:
            logger.warning("Skipping %s: %s", provider.label, exc)
            continue
        logger.debug("%s: %d row(s)", provider.label, len(provider_rows))
        rows.extend(provider_rows)
    contacts = load_contacts(rows)
    logger.info("Loaded %d contact(s) from %d row(s)", len(contacts), len(rows))
    return contacts


def collect_sources(source_dir: Path) -> list[Path]:
    """Return all provider files found directly inside source_dir, sorted by name."""
    if not source_dir.is_dir():
        return []
    return sorted(p for p in source_dir.iterdir() if p.suffix.lower() in SOURCE_SUFFIXES)
