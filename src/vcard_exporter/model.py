from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

UNKNOWN_NAME = "Unknown"

# (display name, phone number) as yielded by a contact provider; either may be None
RawRow = Tuple[Optional[str], Optional[str]]


@dataclass(frozen=True)
class Contact:
    name: str
    number: str
