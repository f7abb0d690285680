from __future__ import annotations

from typing import Sequence

from .errors import InvalidBatchSizeError
from .model import Contact

DEFAULT_BATCH_SIZE = 100


def _check_batch_size(batch_size: int) -> None:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise InvalidBatchSizeError(f"batch size must be a positive integer, got {batch_size!r}")


def batch_count(total: int, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    _check_batch_size(batch_size)
    return -(-total // batch_size)


def partition(contacts: Sequence[Contact], batch_size: int = DEFAULT_BATCH_SIZE) -> list[list[Contact]]:
    """Split contacts into consecutive groups of batch_size; the last may be shorter."""
    _check_batch_size(batch_size)
    return [list(contacts[i:i + batch_size]) for i in range(0, len(contacts), batch_size)]
