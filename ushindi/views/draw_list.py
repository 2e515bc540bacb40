"""Draw list view: all draws plus the create-draw form."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..errors import ApiError, FormError, SchemaError
from ..models import Draw
from .base import LoadResult, ObservableView

if TYPE_CHECKING:
    from ..api.client import RaffleClient
    from ..config import AnimationTimings
    from .draw_detail import DrawDetailView

logger = logging.getLogger(__name__)

MIN_TICKETS = 1
MAX_TICKETS = 10000
DEFAULT_TICKETS = 100
EMPTY_LIST_HINT = "No draws created yet. Create your first draw above!"


def validate_create_form(name: str, total_tickets: object) -> tuple[str, int]:
    """Apply the create-draw form constraints.

    Returns the trimmed name and the ticket count as an ``int``.

    Raises
    ------
    FormError
        If the name is blank or the ticket count is not an integer in
        ``MIN_TICKETS..MAX_TICKETS``.
    """

    clean_name = (name or "").strip()
    if not clean_name:
        raise FormError("Draw name must not be empty")
    if isinstance(total_tickets, bool):
        raise FormError("Total tickets must be a whole number")
    try:
        count = int(str(total_tickets).strip())
    except ValueError as e:
        raise FormError("Total tickets must be a whole number") from e
    if not MIN_TICKETS <= count <= MAX_TICKETS:
        raise FormError(
            f"Total tickets must be between {MIN_TICKETS} and {MAX_TICKETS}"
        )
    return clean_name, count


class DrawListView(ObservableView):
    """Controller for the list of draws.

    Nothing is fetched on construction; call :meth:`load` when the view is
    entered.
    """

    def __init__(
        self,
        client: "RaffleClient",
        timings: Optional["AnimationTimings"] = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._timings = timings
        self.draws: list[Draw] = []
        self.loading = False

    def fetch(self) -> LoadResult[list[Draw]]:
        try:
            return LoadResult.success(self._client.list_draws())
        except (ApiError, SchemaError) as e:
            logger.error("Error fetching draws: %s", e)
            return LoadResult.failure(e)

    def apply(self, result: LoadResult[list[Draw]]) -> None:
        if result.ok and result.value is not None:
            self.draws = list(result.value)
            self._notify()

    def load(self) -> LoadResult[list[Draw]]:
        result = self.fetch()
        self.apply(result)
        return result

    def rows(self) -> list[str]:
        return [draw.summary() for draw in self.draws]

    @property
    def is_empty(self) -> bool:
        return not self.draws

    def create_draw(self, name: str, total_tickets: object) -> bool:
        """Submit the create-draw form and refresh the list on success."""

        clean_name, count = validate_create_form(name, total_tickets)
        self.loading = True
        self._notify()
        try:
            created = self._client.create_draw(clean_name, count)
        except (ApiError, SchemaError) as e:
            logger.error("Error creating draw: %s", e)
            return False
        finally:
            self.loading = False
            self._notify()

        logger.info("Created draw %s (%s)", created.id, created.name)
        self.load()
        return True

    def select(self, draw_id: int) -> "DrawDetailView":
        from .draw_detail import DrawDetailView

        return DrawDetailView(self._client, draw_id, timings=self._timings)
