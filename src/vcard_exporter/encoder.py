"""Plain-text vCard 3.0 rendering.

Records are built by hand rather than through vobject so that names and
numbers land in the file exactly as loaded: no escaping, no line folding,
and no extra properties (PRODID, REV, N) that vobject adds on serialise.
"""
from __future__ import annotations

from typing import Iterable

from .model import Contact

VCARD_VERSION = "3.0"
VCARD_MIME_TYPE = "text/x-vcard"


def encode(contact: Contact) -> str:
    return (
        "BEGIN:VCARD\n"
        f"VERSION:{VCARD_VERSION}\n"
        f"FN:{contact.name}\n"
        f"TEL:{contact.number}\n"
        "END:VCARD\n"
    )


def encode_many(contacts: Iterable[Contact]) -> str:
    return "".join(encode(c) for c in contacts)
