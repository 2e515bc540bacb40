from .base import WireModel
from .draw import (
    STATUS_COMPLETED,
    STATUS_OPEN,
    Draw,
    DrawStats,
    Ticket,
    Winner,
    WinningTicket,
)
from .export import ExportPayload, ExportTicket, ExportWinner

__all__ = [
    "WireModel",
    "STATUS_COMPLETED",
    "STATUS_OPEN",
    "Draw",
    "DrawStats",
    "Ticket",
    "Winner",
    "WinningTicket",
    "ExportPayload",
    "ExportTicket",
    "ExportWinner",
]
