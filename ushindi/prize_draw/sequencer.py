"""Timed reveal sequence for winners already selected by the backend."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from ..config import AnimationTimings
from ..models import Winner

logger = logging.getLogger(__name__)


class StepPhase(str, Enum):
    CYCLE = "cycle"
    SETTLE = "settle"
    REVEAL = "reveal"


@dataclass(frozen=True)
class RevealStep:
    """One state update in the reveal sequence.

    Attributes
    ----------
    phase : StepPhase
        ``cycle`` shows a decoy number, ``settle`` shows the true winning
        number, ``reveal`` holds the winner screen.
    display_value : int
        Ticket number shown while this step is active.
    delay_ms : int
        How long the step stays on screen before the next one is applied.
    winner : Winner
        Winner whose reveal this step belongs to.
    """

    phase: StepPhase
    display_value: int
    delay_ms: int
    winner: Winner


def build_reveal_steps(
    winners: Sequence[Winner],
    purchased_numbers: Iterable[int],
    timings: Optional[AnimationTimings] = None,
    rng: Optional[random.Random] = None,
) -> list[RevealStep]:
    """Lay out the full reveal sequence as an explicit list of steps.

    Parameters
    ----------
    winners : Sequence[Winner]
        Winners in the order returned by the backend.
    purchased_numbers : Iterable[int]
        Pool of ticket numbers the decoy cycle draws from. Decoys are visual
        only and never influence which ticket wins.
    timings : Optional[AnimationTimings], default: None
        Step durations; defaults to 3000 ms of 100 ms cycles, a 1000 ms settle
        and a 3000 ms reveal per winner.
    rng : Optional[random.Random], default: None
        Random source for decoy numbers.

    Returns
    -------
    list[RevealStep]
        ``cycle_steps`` cycle steps, one settle step and one reveal step per
        winner, winners kept in their original order.
    """

    timings = timings or AnimationTimings()
    rng = rng or random.Random()
    pool = sorted(set(purchased_numbers))
    if not pool:
        pool = sorted({w.ticket_number for w in winners})

    steps: list[RevealStep] = []
    for winner in winners:
        for _ in range(timings.cycle_steps):
            steps.append(
                RevealStep(
                    phase=StepPhase.CYCLE,
                    display_value=rng.choice(pool),
                    delay_ms=timings.cycle_interval_ms,
                    winner=winner,
                )
            )
        steps.append(
            RevealStep(
                phase=StepPhase.SETTLE,
                display_value=winner.ticket_number,
                delay_ms=timings.settle_ms,
                winner=winner,
            )
        )
        steps.append(
            RevealStep(
                phase=StepPhase.REVEAL,
                display_value=winner.ticket_number,
                delay_ms=timings.reveal_ms,
                winner=winner,
            )
        )
    return steps


class DrawSequencer:
    """Drive a list of :class:`RevealStep` on a single cancellable timer.

    ``on_step`` is called for every step before its delay elapses. After
    :meth:`cancel` no further ``on_step`` call is made.
    """

    def __init__(
        self,
        steps: Sequence[RevealStep],
        on_step: Callable[[RevealStep], None],
    ) -> None:
        self._steps = list(steps)
        self._on_step = on_step
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.applied = 0
        self.finished = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def run(self) -> bool:
        """Apply every step in order; return ``False`` if cancelled midway.

        The outcome is also kept on :attr:`finished` for callers that ran the
        sequence through :meth:`start`.
        """

        self.finished = self._run_steps()
        if not self.finished:
            logger.debug("Reveal sequence cancelled after %d step(s)", self.applied)
        return self.finished

    def _run_steps(self) -> bool:
        for step in self._steps:
            if self._cancelled.is_set():
                return False
            self._on_step(step)
            self.applied += 1
            if step.delay_ms > 0 and self._cancelled.wait(step.delay_ms / 1000):
                return False
        return not self._cancelled.is_set()

    def start(self) -> threading.Thread:
        """Run the sequence on a daemon thread and return it."""

        if self._thread is not None:
            raise RuntimeError("Sequencer already started")
        self._thread = threading.Thread(
            target=self.run, name="draw-sequencer", daemon=True
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


__all__ = ["DrawSequencer", "RevealStep", "StepPhase", "build_reveal_steps"]
