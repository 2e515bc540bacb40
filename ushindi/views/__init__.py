"""View controllers for the draw list and draw detail screens."""

from .base import LoadResult
from .draw_detail import DrawDetailView, DrawSnapshot, ViewPhase
from .draw_list import DrawListView, validate_create_form
from .selection import TicketSelection

__all__ = [
    "LoadResult",
    "DrawDetailView",
    "DrawSnapshot",
    "ViewPhase",
    "DrawListView",
    "validate_create_form",
    "TicketSelection",
]
