"""Per-draw controller: tickets, purchase, draw execution and export."""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..config import AnimationTimings
from ..errors import ApiError, FormError, SchemaError
from ..models import Draw, DrawStats, Ticket, Winner
from ..prize_draw.export import ResultsExporter
from ..prize_draw.sequencer import (
    DrawSequencer,
    RevealStep,
    StepPhase,
    build_reveal_steps,
)
from .base import LoadResult, ObservableView
from .selection import TicketSelection

if TYPE_CHECKING:
    from ..api.client import RaffleClient

logger = logging.getLogger(__name__)


class ViewPhase(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    DRAWING = "drawing"
    REVEALING = "revealing"
    FINAL = "final"


@dataclass(frozen=True)
class DrawSnapshot:
    """Draw, tickets and stats fetched together for one render."""

    draw: Draw
    tickets: list[Ticket]
    stats: DrawStats


class DrawDetailView(ObservableView):
    """State machine behind the draw detail screen.

    Phases move ``loading -> active -> drawing <-> revealing -> final``. A
    completed draw that already has winners loads straight into ``final``.
    Every mutation is followed by a re-fetch; tickets and stats are never
    patched locally.

    Parameters
    ----------
    client : RaffleClient
        API client used for every fetch and mutation.
    draw_id : int
        Identifier of the draw this view shows.
    timings : Optional[AnimationTimings], default: None
        Reveal sequence durations. Defaults to the standard 3s/1s/3s cadence.
    rng : Optional[random.Random], default: None
        Random source for the decoy numbers shown while drawing.
    exporter : Optional[ResultsExporter], default: None
        Exporter used by :meth:`export`; built from ``client`` when omitted.
    """

    def __init__(
        self,
        client: "RaffleClient",
        draw_id: int,
        *,
        timings: Optional[AnimationTimings] = None,
        rng: Optional[random.Random] = None,
        exporter: Optional[ResultsExporter] = None,
    ) -> None:
        super().__init__()
        self._client = client
        self.draw_id = draw_id
        self._timings = timings or AnimationTimings()
        self._rng = rng
        self._exporter = exporter or ResultsExporter(client)
        self._sequencer: Optional[DrawSequencer] = None
        self._closed = False

        self.phase = ViewPhase.LOADING
        self.draw: Optional[Draw] = None
        self.tickets: list[Ticket] = []
        self.stats: Optional[DrawStats] = None
        self.selection = TicketSelection()
        self.buyer_name = ""
        self.winners: list[Winner] = []
        self.current_number: Optional[int] = None
        self.revealed_winner: Optional[Winner] = None

    # -------- loading --------
    def fetch(self) -> LoadResult[DrawSnapshot]:
        """Fetch draw, tickets and stats concurrently and join the results."""

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="draw-load") as pool:
            draw_f = pool.submit(self._client.get_draw, self.draw_id)
            tickets_f = pool.submit(self._client.get_tickets, self.draw_id)
            stats_f = pool.submit(self._client.get_stats, self.draw_id)
            try:
                snapshot = DrawSnapshot(
                    draw=draw_f.result(),
                    tickets=tickets_f.result(),
                    stats=stats_f.result(),
                )
            except (ApiError, SchemaError) as e:
                logger.error("Error fetching draw details for %s: %s", self.draw_id, e)
                return LoadResult.failure(e)
        return LoadResult.success(snapshot)

    def apply(self, result: LoadResult[DrawSnapshot]) -> None:
        """Fold a load result into the view state."""

        if self._closed or not result.ok or result.value is None:
            return
        snapshot = result.value
        self.draw = snapshot.draw
        self.tickets = sorted(snapshot.tickets, key=lambda t: t.ticket_number)
        self.stats = snapshot.stats
        self.selection.sync(self.tickets)

        if snapshot.draw.is_completed and snapshot.draw.winners:
            self.winners = list(snapshot.draw.winners)
            self.phase = ViewPhase.FINAL
        elif self.phase is ViewPhase.LOADING:
            self.phase = ViewPhase.ACTIVE
        self._notify()

    def load(self) -> LoadResult[DrawSnapshot]:
        result = self.fetch()
        self.apply(result)
        return result

    # -------- derived state --------
    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def purchased_numbers(self) -> list[int]:
        return [t.ticket_number for t in self.tickets if t.purchased]

    @property
    def can_run_draw(self) -> bool:
        return (
            self.draw is not None
            and self.draw.is_open
            and self.stats is not None
            and self.stats.purchased_tickets > 0
        )

    # -------- ticket selection & purchase --------
    def toggle_ticket(self, ticket_number: int) -> bool:
        """Toggle a ticket in the selection; purchased tickets are a no-op."""

        if self.phase is not ViewPhase.ACTIVE:
            return False
        changed = self.selection.toggle(ticket_number)
        if changed:
            self._notify()
        return changed

    def purchase(self, buyer_name: Optional[str] = None) -> bool:
        """Purchase the selected tickets for ``buyer_name``.

        When ``buyer_name`` is omitted the current :attr:`buyer_name` field is
        used. On success the selection and buyer name are cleared and the
        view re-fetches. Returns ``True`` on success.
        """

        if buyer_name is not None:
            self.buyer_name = buyer_name
        name = self.buyer_name.strip()
        if self.phase is not ViewPhase.ACTIVE or not name or not len(self.selection):
            return False

        numbers = [n for n in self.selection.numbers if self.selection.is_selectable(n)]
        if not numbers:
            return False
        try:
            self._client.purchase_tickets(self.draw_id, name, numbers)
        except (ApiError, SchemaError) as e:
            logger.error("Error purchasing tickets in draw %s: %s", self.draw_id, e)
            return False

        self.selection.clear()
        self.buyer_name = ""
        self._notify()
        self.load()
        return True

    # -------- draw execution --------
    def validate_winner_count(self, number_of_winners: object) -> int:
        """Apply the run-draw form bounds (``1..purchased tickets``)."""

        if isinstance(number_of_winners, bool):
            raise FormError("Number of winners must be a whole number")
        try:
            count = int(str(number_of_winners).strip())
        except ValueError as e:
            raise FormError("Number of winners must be a whole number") from e
        if count < 1:
            raise FormError("Number of winners must be at least 1")
        purchased = self.stats.purchased_tickets if self.stats is not None else 0
        if count > purchased:
            raise FormError(
                f"Number of winners cannot exceed purchased tickets ({purchased})"
            )
        return count

    def run_draw(self, number_of_winners: object) -> bool:
        """Execute the draw on the backend and play the reveal sequence.

        The backend selects and orders the winners; this view only replays
        them. Returns ``True`` once the sequence finished and the view
        settled in ``final``. A failed request leaves the state untouched.
        """

        if self.phase is not ViewPhase.ACTIVE or not self.can_run_draw:
            return False
        count = self.validate_winner_count(number_of_winners)

        try:
            winners = self._client.run_draw(self.draw_id, count)
        except (ApiError, SchemaError) as e:
            logger.error("Error running draw %s: %s", self.draw_id, e)
            return False

        logger.info("Draw %s returned %d winner(s)", self.draw_id, len(winners))
        self.winners = list(winners)
        steps = build_reveal_steps(
            self.winners, self.purchased_numbers, self._timings, self._rng
        )
        sequencer = DrawSequencer(steps, self._apply_step)
        self._sequencer = sequencer
        # close() from another thread cancels a pending delay immediately
        sequencer.start()
        sequencer.join()
        self._sequencer = None
        finished = sequencer.finished
        if not finished or self._closed:
            return False

        self.current_number = None
        self.revealed_winner = None
        self.phase = ViewPhase.FINAL
        self._notify()
        self.load()
        return True

    def _apply_step(self, step: RevealStep) -> None:
        if self._closed:
            return
        if step.phase is StepPhase.REVEAL:
            self.phase = ViewPhase.REVEALING
            self.revealed_winner = step.winner
        else:
            self.phase = ViewPhase.DRAWING
            self.revealed_winner = None
        self.current_number = step.display_value
        self._notify()

    # -------- export & teardown --------
    def export(self, directory: Union[str, Path] = ".") -> Optional[Path]:
        """Write the results sheet; returns the path or ``None`` on failure."""
        return self._exporter.export(self.draw_id, directory)

    def close(self) -> None:
        """Tear the view down; pending reveal steps will not touch state."""

        self._closed = True
        if self._sequencer is not None:
            self._sequencer.cancel()
        self.selection.clear()
        self.buyer_name = ""
        self._listeners.clear()
