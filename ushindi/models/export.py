"""Schema of the ``GET /draws/:id/export`` payload."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import WireModel


class ExportTicket(WireModel):
    ticket_number: int
    purchased: bool = False
    buyer_name: Optional[str] = None
    purchased_at: Optional[datetime] = None


class ExportWinner(WireModel):
    rank: int
    ticket_number: int
    buyer_name: Optional[str] = None
    winning_time: Optional[datetime] = None


class ExportPayload(WireModel):
    """Draw metadata plus the full ticket and winner lists used for export."""

    draw_name: str
    draw_date: Optional[datetime] = None
    status: str
    total_tickets: int
    purchased_tickets: int
    all_tickets: list[ExportTicket] = Field(default_factory=list)
    winners: list[ExportWinner] = Field(default_factory=list)

    def purchased_only(self) -> list[ExportTicket]:
        """Return the purchased subset of ``all_tickets`` in payload order."""
        return [ticket for ticket in self.all_tickets if ticket.purchased]


__all__ = ["ExportPayload", "ExportTicket", "ExportWinner"]
