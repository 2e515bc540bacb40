import logging
from typing import Any, Iterable, Mapping, Optional

import requests

from ..config import get_settings
from ..errors import ApiError
from ..models import Draw, DrawStats, ExportPayload, Ticket, Winner

logger = logging.getLogger(__name__)


class RaffleClient:
    """Thin HTTP client for the raffle API.

    The client performs no retries, sends no authentication headers and treats
    transport failures and non-2xx responses alike by raising
    :class:`~ushindi.errors.ApiError`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if base_url is None:
            settings = get_settings()
            base_url = settings.api_base_url
            if timeout is None:
                timeout = settings.api_timeout
        if not base_url:
            raise ValueError("An API base URL is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # -------- headers --------
    @property
    def headers(self) -> Mapping[str, str]:
        return {"Accept": "application/json"}

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict] = None,
        return_in_json: bool = True,
    ) -> Any:
        method = method.upper()
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(
                method=method,
                url=url,
                headers=self.headers,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(method, path, reason=str(e)) from e

        if not 200 <= r.status_code < 300:
            raise ApiError(method, path, status_code=r.status_code, reason=r.reason)
        if not return_in_json:
            return r.content
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(
                method, path, status_code=r.status_code, reason="response is not JSON"
            ) from e

    # -------- API callers --------
    def list_draws(self) -> list[Draw]:
        return Draw.list_from_json(self._request("GET", "/draws"))

    def create_draw(self, name: str, total_tickets: int) -> Draw:
        data = self._request(
            "POST",
            "/draws",
            json={"name": name, "totalTickets": total_tickets},
        )
        return Draw.from_json(data)

    def get_draw(self, draw_id: int) -> Draw:
        return Draw.from_json(self._request("GET", f"/draws/{draw_id}"))

    def get_tickets(self, draw_id: int) -> list[Ticket]:
        return Ticket.list_from_json(self._request("GET", f"/draws/{draw_id}/tickets"))

    def get_stats(self, draw_id: int) -> DrawStats:
        return DrawStats.from_json(self._request("GET", f"/draws/{draw_id}/stats"))

    def purchase_tickets(
        self, draw_id: int, buyer_name: str, ticket_numbers: Iterable[int]
    ) -> None:
        numbers = [int(n) for n in ticket_numbers]
        # Buyer names stay out of INFO-level logs
        logger.debug("Purchasing %d ticket(s) in draw %s", len(numbers), draw_id)
        self._request(
            "POST",
            f"/draws/{draw_id}/purchase",
            json={"buyerName": buyer_name, "ticketNumbers": numbers},
            return_in_json=False,
        )

    def run_draw(self, draw_id: int, number_of_winners: int) -> list[Winner]:
        """Ask the backend to select winners.

        Selection happens entirely server-side; the returned list keeps the
        order the backend sent it in (rank order).
        """
        data = self._request(
            "POST",
            f"/draws/{draw_id}/run-draw",
            json={"numberOfWinners": number_of_winners},
        )
        return Winner.list_from_json(data)

    def get_export(self, draw_id: int) -> ExportPayload:
        return ExportPayload.from_json(self._request("GET", f"/draws/{draw_id}/export"))
