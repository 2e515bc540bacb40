from __future__ import annotations

import random
import threading
import unittest

from fakes import FakeRaffleClient

from ushindi.config import AnimationTimings
from ushindi.errors import FormError
from ushindi.views import DrawDetailView, ViewPhase


class DrawDetailViewTests(unittest.TestCase):
    def setUp(self):
        self.client = FakeRaffleClient()
        self.draw = self.client.create_draw("Xmas", 50)
        self.client.calls.clear()
        self.view = DrawDetailView(
            self.client,
            self.draw.id,
            timings=AnimationTimings.instant(),
            rng=random.Random(7),
        )

    def _buy(self, buyer, *numbers):
        for n in numbers:
            self.view.toggle_ticket(n)
        return self.view.purchase(buyer)

    def test_load_moves_to_active(self):
        self.assertIs(self.view.phase, ViewPhase.LOADING)
        self.assertTrue(self.view.load().ok)
        self.assertIs(self.view.phase, ViewPhase.ACTIVE)
        self.assertEqual(len(self.view.tickets), 50)
        self.assertEqual(self.view.stats.purchased_tickets, 0)
        self.assertEqual(self.view.stats.available_tickets, 50)
        self.assertEqual(
            sorted(c[0] for c in self.client.calls),
            ["get_draw", "get_stats", "get_tickets"],
        )

    def test_failed_load_leaves_state(self):
        self.client.fail.add("get_stats")
        with self.assertLogs("ushindi.views.draw_detail", level="ERROR"):
            result = self.view.load()
        self.assertFalse(result.ok)
        self.assertIs(self.view.phase, ViewPhase.LOADING)
        self.assertIsNone(self.view.draw)

    def test_purchase_scenario(self):
        self.view.load()
        self.assertTrue(self._buy("Amina", 3, 7))

        self.assertEqual(self.view.stats.purchased_tickets, 2)
        self.assertEqual(self.view.stats.available_tickets, 48)
        self.assertEqual(self.view.purchased_numbers, [3, 7])
        self.assertEqual(len(self.view.selection), 0)
        self.assertEqual(self.view.buyer_name, "")
        self.assertIn(("purchase_tickets", 1, "Amina", [3, 7]), self.client.calls)

        # Purchased tickets are locked
        self.assertFalse(self.view.toggle_ticket(3))
        self.assertFalse(self.view.toggle_ticket(7))
        self.assertEqual(len(self.view.selection), 0)

    def test_purchase_requires_name_and_selection(self):
        self.view.load()
        self.assertFalse(self.view.purchase("Amina"))
        self.view.toggle_ticket(4)
        self.assertFalse(self.view.purchase("   "))
        self.assertEqual(self.client.count("purchase_tickets"), 0)
        self.assertEqual(self.view.selection.numbers, [4])

    def test_purchased_ticket_never_resent(self):
        self.view.load()
        self.view.toggle_ticket(5)
        # Someone else buys ticket 5 before we submit
        self.client.purchase_tickets(self.draw.id, "Baraka", [5])
        self.view.load()
        self.view.toggle_ticket(6)
        self.assertTrue(self.view.purchase("Amina"))
        self.assertIn(("purchase_tickets", 1, "Amina", [6]), self.client.calls)

    def test_failed_purchase_keeps_state(self):
        self.view.load()
        self.view.toggle_ticket(9)
        self.client.fail.add("purchase_tickets")
        with self.assertLogs("ushindi.views.draw_detail", level="ERROR"):
            self.assertFalse(self.view.purchase("Amina"))
        self.assertEqual(self.view.selection.numbers, [9])
        self.assertEqual(self.view.buyer_name, "Amina")
        self.assertEqual(self.view.stats.purchased_tickets, 0)
        self.assertIs(self.view.phase, ViewPhase.ACTIVE)

    def test_run_draw_single_winner_scenario(self):
        self.view.load()
        self._buy("Amina", 3, 7)
        self.client.winner_order = [7]

        self.assertTrue(self.view.run_draw(1))

        self.assertIs(self.view.phase, ViewPhase.FINAL)
        self.assertEqual(
            [w.label() for w in self.view.winners],
            ["Ticket #7 — Winner: Amina — #1"],
        )
        self.assertTrue(self.view.draw.is_completed)

    def test_reveal_cycles_follow_rank_order(self):
        self.view.load()
        self._buy("Amina", 3, 7)
        self._buy("Baraka", 12, 40)
        self.client.winner_order = [40, 3, 12]
        frames = []
        self.view.subscribe(
            lambda: frames.append(
                (self.view.phase, self.view.current_number, self.view.revealed_winner)
            )
        )

        self.assertTrue(self.view.run_draw("3"))

        reveals = [f for f in frames if f[0] is ViewPhase.REVEALING]
        self.assertEqual([f[2].rank for f in reveals], [1, 2, 3])
        self.assertEqual([f[1] for f in reveals], [40, 3, 12])
        # The number on screen right before each reveal is the true winner
        for i, frame in enumerate(frames):
            if frame[0] is ViewPhase.REVEALING:
                self.assertIs(frames[i - 1][0], ViewPhase.DRAWING)
                self.assertEqual(frames[i - 1][1], frame[2].ticket_number)
        self.assertIs(frames[-1][0], ViewPhase.FINAL)

    def test_decoy_numbers_come_from_purchased_tickets(self):
        view = DrawDetailView(
            self.client,
            self.draw.id,
            timings=AnimationTimings(cycle_interval_ms=1, cycle_duration_ms=20, settle_ms=0, reveal_ms=0),
            rng=random.Random(3),
        )
        view.load()
        for n in (2, 11, 19):
            view.toggle_ticket(n)
        view.purchase("Wanjiru")
        shown = []
        view.subscribe(lambda: shown.append((view.phase, view.current_number)))

        self.assertTrue(view.run_draw(1))
        drawing = {n for phase, n in shown if phase is ViewPhase.DRAWING}
        self.assertTrue(drawing)
        self.assertTrue(drawing <= {2, 11, 19})

    def test_run_draw_guards(self):
        self.view.load()
        self.assertFalse(self.view.can_run_draw)
        self.assertFalse(self.view.run_draw(1))

        self._buy("Amina", 1, 2)
        self.assertTrue(self.view.can_run_draw)
        for bad in (0, -1, 3, "two", True):
            with self.subTest(bad=bad):
                with self.assertRaises(FormError):
                    self.view.run_draw(bad)
        self.assertEqual(self.client.count("run_draw"), 0)

    def test_failed_run_draw_keeps_state(self):
        self.view.load()
        self._buy("Amina", 1)
        self.client.fail.add("run_draw")
        with self.assertLogs("ushindi.views.draw_detail", level="ERROR"):
            self.assertFalse(self.view.run_draw(1))
        self.assertIs(self.view.phase, ViewPhase.ACTIVE)
        self.assertEqual(self.view.winners, [])
        self.assertIsNone(self.view.current_number)

    def test_completed_draw_loads_straight_to_final(self):
        self.client.purchase_tickets(self.draw.id, "Amina", [7])
        self.client.run_draw(self.draw.id, 1)
        view = DrawDetailView(self.client, self.draw.id)
        view.load()
        self.assertIs(view.phase, ViewPhase.FINAL)
        self.assertEqual(view.winners[0].ticket_number, 7)
        self.assertFalse(view.toggle_ticket(1))

    def test_close_mid_sequence_stops_updates(self):
        self.view.load()
        self._buy("Amina", 3, 7)
        self.client.winner_order = [7, 3]
        updates = []

        def on_change():
            updates.append(self.view.phase)
            if self.view.phase is ViewPhase.REVEALING:
                self.view.close()

        self.view.subscribe(on_change)
        self.assertFalse(self.view.run_draw(2))

        self.assertIs(updates[-1], ViewPhase.REVEALING)
        self.assertEqual(self.view.revealed_winner.rank, 1)
        self.assertTrue(self.view.closed)
        # No re-fetch happens after teardown
        self.assertEqual(self.client.calls[-1][0], "run_draw")

    def test_close_from_another_thread_interrupts_pending_delay(self):
        self.view = DrawDetailView(
            self.client,
            self.draw.id,
            timings=AnimationTimings(
                cycle_interval_ms=0, cycle_duration_ms=0, settle_ms=60000, reveal_ms=60000
            ),
        )
        self.view.load()
        self._buy("Amina", 3)
        drawing = threading.Event()
        outcome = []

        def on_change():
            if self.view.phase is ViewPhase.DRAWING:
                drawing.set()

        self.view.subscribe(on_change)
        worker = threading.Thread(target=lambda: outcome.append(self.view.run_draw(1)))
        worker.start()
        self.assertTrue(drawing.wait(5))

        self.view.close()
        worker.join(5)

        self.assertFalse(worker.is_alive())
        self.assertEqual(outcome, [False])
        self.assertIsNot(self.view.phase, ViewPhase.FINAL)
        self.assertEqual(self.client.calls[-1][0], "run_draw")

    def test_close_clears_selection(self):
        self.view.load()
        self.view.toggle_ticket(1)
        self.view.close()
        self.assertEqual(len(self.view.selection), 0)
        self.view.apply(self.view.fetch())
        self.assertIs(self.view.phase, ViewPhase.ACTIVE)


if __name__ == "__main__":
    unittest.main()
