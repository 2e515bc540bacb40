"""Terminal front end for the raffle client."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from .api.client import RaffleClient
from .config import AnimationTimings, Settings, get_settings
from .errors import FormError
from .logging_config import configure_logging
from .render import render_detail, render_draw_list, render_winners
from .views import DrawDetailView, DrawListView, ViewPhase
from .views.draw_list import DEFAULT_TICKETS

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ushindi", description="Ushindi Seme prize draw client"
    )
    parser.add_argument("--base-url", help="Raffle API base URL")
    parser.add_argument("--log-level", help="Log level (default from RAFFLE_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all draws")

    create = sub.add_parser("create", help="Create a new draw")
    create.add_argument("name")
    create.add_argument("--tickets", default=str(DEFAULT_TICKETS))

    show = sub.add_parser("show", help="Show a draw's tickets and stats")
    show.add_argument("draw_id", type=int)

    purchase = sub.add_parser("purchase", help="Purchase tickets in a draw")
    purchase.add_argument("draw_id", type=int)
    purchase.add_argument("--buyer", required=True)
    purchase.add_argument("tickets", type=int, nargs="+")

    run = sub.add_parser("run-draw", help="Run the draw and reveal the winners")
    run.add_argument("draw_id", type=int)
    run.add_argument("--winners", default="1")
    run.add_argument("--fast", action="store_true", help="Skip the reveal delays")

    export = sub.add_parser("export", help="Export the results sheet")
    export.add_argument("draw_id", type=int)
    export.add_argument("--output-dir")

    return parser


def _emit(out: TextIO, text: str) -> None:
    out.write(text + "\n")
    out.flush()


def _cmd_list(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    view = DrawListView(client)
    if not view.load().ok:
        return 1
    _emit(out, render_draw_list(view))
    return 0


def _cmd_create(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    view = DrawListView(client)
    if not view.create_draw(args.name, args.tickets):
        return 1
    _emit(out, render_draw_list(view))
    return 0


def _load_detail(
    client: RaffleClient, draw_id: int, timings: Optional[AnimationTimings] = None
) -> Optional[DrawDetailView]:
    view = DrawDetailView(client, draw_id, timings=timings)
    if not view.load().ok:
        return None
    return view


def _cmd_show(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    view = _load_detail(client, args.draw_id)
    if view is None:
        return 1
    _emit(out, render_detail(view))
    return 0


def _cmd_purchase(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    view = _load_detail(client, args.draw_id)
    if view is None:
        return 1
    # A repeated number would toggle the ticket back out of the selection
    tickets = list(dict.fromkeys(args.tickets))
    rejected = [n for n in tickets if not view.toggle_ticket(n)]
    if rejected:
        _emit(out, "Not available: " + ", ".join(f"#{n}" for n in rejected))
    if not view.purchase(args.buyer):
        return 1
    _emit(out, render_detail(view))
    return 0


def _cmd_run_draw(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    timings = AnimationTimings.instant() if args.fast else settings.timings
    view = _load_detail(client, args.draw_id, timings=timings)
    if view is None:
        return 1
    if view.phase is ViewPhase.FINAL:
        _emit(out, render_winners(view.winners))
        return 0
    if not view.can_run_draw:
        _emit(out, "This draw cannot be run (closed or no tickets purchased).")
        return 1

    def redraw() -> None:
        if view.phase in (ViewPhase.DRAWING, ViewPhase.REVEALING):
            _emit(out, render_detail(view))

    view.subscribe(redraw)
    try:
        done = view.run_draw(args.winners)
    except KeyboardInterrupt:
        view.close()
        return 130
    if not done:
        return 1
    _emit(out, render_detail(view))
    return 0


def _cmd_export(client: RaffleClient, settings: Settings, args, out: TextIO) -> int:
    view = DrawDetailView(client, args.draw_id)
    path = view.export(args.output_dir or settings.export_dir)
    if path is None:
        return 1
    _emit(out, f"Exported {path}")
    return 0


COMMANDS = {
    "list": _cmd_list,
    "create": _cmd_create,
    "show": _cmd_show,
    "purchase": _cmd_purchase,
    "run-draw": _cmd_run_draw,
    "export": _cmd_export,
}


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    client: Optional[RaffleClient] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Entry point of the ``ushindi`` console script."""

    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    out = out or sys.stdout

    if client is None:
        client = RaffleClient(
            base_url=args.base_url or settings.api_base_url,
            timeout=settings.api_timeout,
        )

    try:
        return COMMANDS[args.command](client, settings, args, out)
    except FormError as e:
        _emit(out, f"Invalid input: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
