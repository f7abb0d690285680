from __future__ import annotations

from typing import Sequence

from .model import Contact


class SelectionState:
    """Which rows of the loaded contact list are ticked.

    The list itself never changes after loading, so `total` is fixed for the
    life of the selection.
    """

    def __init__(self, total: int):
        if total < 0:
            raise ValueError("total must not be negative")
        self.total = total
        self._selected: set[int] = set()

    def _check(self, index: int) -> None:
        if not 0 <= index < self.total:
            raise IndexError(f"contact index {index} out of range (0..{self.total - 1})")

    def select_all(self) -> None:
        self._selected = set(range(self.total))

    def clear_all(self) -> None:
        self._selected.clear()

    def toggle(self, index: int) -> None:
        self._check(index)
        if index in self._selected:
            self._selected.remove(index)
        else:
            self._selected.add(index)

    def is_selected(self, index: int) -> bool:
        return index in self._selected

    def selected_count(self) -> int:
        return len(self._selected)

    def all_selected(self) -> bool:
        return self.selected_count() == self.total

    # The "Select All" button: any partial selection grows to the full list.
    def toggle_all(self) -> None:
        if self.all_selected():
            self.clear_all()
        else:
            self.select_all()

    def toggle_all_label(self) -> str:
        return "Unselect All" if self.all_selected() else "Select All"

    def selected_indices(self) -> list[int]:
        return sorted(self._selected)

    def selected_contacts(self, contacts: Sequence[Contact]) -> list[Contact]:
        return [contacts[i] for i in self.selected_indices()]
