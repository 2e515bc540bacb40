"""Plain-text rendering of the view controllers."""

from __future__ import annotations

from typing import Iterable

from .models import Ticket, Winner
from .views import DrawDetailView, DrawListView, ViewPhase
from .views.draw_list import EMPTY_LIST_HINT
from .views.selection import TicketSelection

GRID_COLUMNS = 10


def render_draw_list(view: DrawListView) -> str:
    lines = ["All Draws"]
    if view.is_empty:
        lines.append(f"  {EMPTY_LIST_HINT}")
        return "\n".join(lines)
    for draw in view.draws:
        lines.append(f"  [{draw.id}] {draw.summary()}")
    return "\n".join(lines)


def render_ticket_cell(ticket: Ticket, selection: TicketSelection, width: int) -> str:
    label = str(ticket.ticket_number).rjust(width)
    if ticket.purchased:
        return f"[{label}]"
    if ticket.ticket_number in selection:
        return f"<{label}>"
    return f" {label} "


def render_ticket_grid(
    tickets: Iterable[Ticket], selection: TicketSelection, columns: int = GRID_COLUMNS
) -> str:
    """Lay tickets out in rows; ``[n]`` purchased, ``<n>`` selected."""

    tickets = list(tickets)
    if not tickets:
        return ""
    width = len(str(max(t.ticket_number for t in tickets)))
    cells = [render_ticket_cell(t, selection, width) for t in tickets]
    rows = [" ".join(cells[i : i + columns]) for i in range(0, len(cells), columns)]
    return "\n".join(rows)


def render_winner(winner: Winner) -> str:
    return "\n".join(
        [
            "WINNER!",
            f"  #{winner.rank}",
            f"  Ticket #{winner.ticket_number}",
            f"  {winner.buyer_name}",
        ]
    )


def render_winners(winners: Iterable[Winner]) -> str:
    lines = ["WINNERS!"]
    lines.extend(f"  {winner.label()}" for winner in winners)
    return "\n".join(lines)


def render_detail(view: DrawDetailView) -> str:
    """Render the screen for the view's current phase."""

    if view.phase is ViewPhase.LOADING or view.draw is None or view.stats is None:
        return "Loading..."
    if view.phase is ViewPhase.DRAWING:
        return f"Drawing... {view.current_number}"
    if view.phase is ViewPhase.REVEALING and view.revealed_winner is not None:
        return render_winner(view.revealed_winner)
    if view.phase is ViewPhase.FINAL:
        return render_winners(view.winners)

    lines = [
        view.draw.name,
        f"  {view.stats.purchased_tickets} Purchased   {view.stats.available_tickets} Available",
        f"  Selected: {len(view.selection)} ticket(s)"
        + (
            " " + " ".join(f"#{n}" for n in view.selection.numbers)
            if len(view.selection)
            else ""
        ),
        "",
        render_ticket_grid(view.tickets, view.selection),
    ]
    return "\n".join(lines)
