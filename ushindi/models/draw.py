"""Models for draws, tickets, stats and winners."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import WireModel

STATUS_OPEN = "open"
STATUS_COMPLETED = "completed"


class WinningTicket(WireModel):
    """Ticket details embedded in a :class:`Winner`."""

    ticket_number: int
    buyer_name: Optional[str] = None


class Winner(WireModel):
    """A ticket selected by the backend's draw execution.

    Attributes
    ----------
    rank : int
        1-based position in the winners list.
    ticket : WinningTicket
        Winning ticket number and the buyer it belongs to.
    """

    rank: int
    ticket: WinningTicket

    @property
    def ticket_number(self) -> int:
        return self.ticket.ticket_number

    @property
    def buyer_name(self) -> str:
        return self.ticket.buyer_name or ""

    def label(self) -> str:
        """Single-line description used on the final results screen."""
        return f"Ticket #{self.ticket_number} — Winner: {self.buyer_name} — #{self.rank}"


class Draw(WireModel):
    """A named raffle event with a fixed ticket inventory.

    ``status`` is kept as the raw server string; ``open`` and ``completed``
    are the values the client acts on.
    """

    id: int
    name: str
    total_tickets: int
    status: str
    created_at: Optional[datetime] = None
    winners: list[Winner] = Field(default_factory=list)

    @field_validator("winners", mode="before")
    @classmethod
    def _winners_default(cls, value):
        # The backend sends null for draws that have not run
        return [] if value is None else value

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    def summary(self) -> str:
        return f"{self.name} · {self.total_tickets} tickets · {self.status}"


class Ticket(WireModel):
    """One numbered, purchasable unit within a draw."""

    id: int
    ticket_number: int
    purchased: bool = False
    buyer_name: Optional[str] = None


class DrawStats(WireModel):
    """Purchased/available counts as computed by the backend."""

    purchased_tickets: int
    available_tickets: int


__all__ = [
    "STATUS_COMPLETED",
    "STATUS_OPEN",
    "Draw",
    "DrawStats",
    "Ticket",
    "Winner",
    "WinningTicket",
]
