"""Ticket grid selection state."""

from __future__ import annotations

from typing import Iterable, Iterator

from ..models import Ticket


class TicketSelection:
    """Ordered set of ticket numbers picked by the buyer before purchase.

    The selection only ever holds numbers of tickets known to be
    unpurchased; :meth:`sync` re-applies that rule after a re-fetch.
    """

    def __init__(self) -> None:
        self._numbers: dict[int, None] = {}
        self._available: set[int] = set()

    def __contains__(self, number: object) -> bool:
        return number in self._numbers

    def __iter__(self) -> Iterator[int]:
        return iter(self._numbers)

    def __len__(self) -> int:
        return len(self._numbers)

    @property
    def numbers(self) -> list[int]:
        """Selected ticket numbers in the order they were picked."""
        return list(self._numbers)

    def sync(self, tickets: Iterable[Ticket]) -> None:
        """Refresh the set of selectable numbers and drop stale picks."""
        self._available = {t.ticket_number for t in tickets if not t.purchased}
        for number in list(self._numbers):
            if number not in self._available:
                del self._numbers[number]

    def is_selectable(self, number: int) -> bool:
        return number in self._available

    def toggle(self, number: int) -> bool:
        """Flip ``number`` in or out of the selection.

        Purchased or unknown tickets are left alone. Returns ``True`` when the
        selection changed.
        """
        if number in self._numbers:
            del self._numbers[number]
            return True
        if not self.is_selectable(number):
            return False
        self._numbers[number] = None
        return True

    def clear(self) -> None:
        self._numbers.clear()
