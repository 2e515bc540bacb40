import json as _json
import os
import unittest
from unittest.mock import patch

import requests

from ushindi.api.client import RaffleClient
from ushindi.errors import ApiError, SchemaError


class DummyResponse:
    def __init__(self, json_data=None, content: bytes = b"", status_code=200, reason="OK"):
        self._json = json_data
        if json_data is not None and not content:
            content = _json.dumps(json_data).encode()
        self.content = content
        self.status_code = status_code
        self.reason = reason

    def json(self):
        if self._json is None:
            return _json.loads(self.content)
        return self._json


class DummySession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "json": json,
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


DRAW_JSON = {
    "id": 1,
    "name": "Xmas",
    "totalTickets": 50,
    "status": "open",
    "createdAt": "2024-12-01T10:00:00Z",
}


class TestRaffleClient(unittest.TestCase):
    def test_base_url_from_environment(self):
        with patch.dict(os.environ, {"RAFFLE_API_BASE_URL": "http://api.test:9000/"}, clear=True):
            with patch("ushindi.config.load_dotenv"):
                client = RaffleClient(session=DummySession())
        self.assertEqual(client.base_url, "http://api.test:9000")
        self.assertIsNone(client.timeout)

    def test_list_draws_builds_url_and_parses(self):
        session = DummySession(DummyResponse(json_data=[DRAW_JSON]))
        client = RaffleClient(base_url="http://host/", session=session)

        draws = client.list_draws()

        self.assertEqual(session.calls[0]["method"], "GET")
        self.assertEqual(session.calls[0]["url"], "http://host/draws")
        self.assertEqual(session.calls[0]["headers"], {"Accept": "application/json"})
        self.assertEqual(len(draws), 1)
        self.assertEqual(draws[0].total_tickets, 50)
        self.assertTrue(draws[0].is_open)

    def test_mutations_send_camel_case_bodies(self):
        session = DummySession(DummyResponse(json_data=DRAW_JSON))
        client = RaffleClient(base_url="http://host", session=session, timeout=5)

        client.create_draw("Xmas", 50)
        self.assertEqual(session.calls[-1]["json"], {"name": "Xmas", "totalTickets": 50})
        self.assertEqual(session.calls[-1]["timeout"], 5)

        session.response = DummyResponse(content=b"", status_code=201)
        self.assertIsNone(client.purchase_tickets(1, "Amina", [3, 7]))
        self.assertEqual(session.calls[-1]["url"], "http://host/draws/1/purchase")
        self.assertEqual(
            session.calls[-1]["json"], {"buyerName": "Amina", "ticketNumbers": [3, 7]}
        )

        session.response = DummyResponse(
            json_data=[
                {"rank": 1, "ticket": {"ticketNumber": 7, "buyerName": "Amina"}},
                {"rank": 2, "ticket": {"ticketNumber": 3, "buyerName": "Amina"}},
            ]
        )
        winners = client.run_draw(1, 2)
        self.assertEqual(session.calls[-1]["url"], "http://host/draws/1/run-draw")
        self.assertEqual(session.calls[-1]["json"], {"numberOfWinners": 2})
        self.assertEqual([w.ticket_number for w in winners], [7, 3])
        self.assertEqual([w.rank for w in winners], [1, 2])

    def test_purchase_ignores_non_json_success_body(self):
        session = DummySession(DummyResponse(content=b"Tickets purchased", status_code=201))
        client = RaffleClient(base_url="http://host", session=session)
        self.assertIsNone(client.purchase_tickets(1, "Amina", [3]))
        self.assertEqual(session.calls[-1]["method"], "POST")

    def test_get_draw_accepts_null_winners(self):
        session = DummySession(DummyResponse(json_data={**DRAW_JSON, "winners": None}))
        client = RaffleClient(base_url="http://host", session=session)
        self.assertEqual(client.get_draw(1).winners, [])

    def test_stats_and_tickets(self):
        session = DummySession(
            DummyResponse(json_data={"purchasedTickets": 2, "availableTickets": 48})
        )
        client = RaffleClient(base_url="http://host", session=session)
        stats = client.get_stats(4)
        self.assertEqual(session.calls[-1]["url"], "http://host/draws/4/stats")
        self.assertEqual((stats.purchased_tickets, stats.available_tickets), (2, 48))

        session.response = DummyResponse(
            json_data=[
                {"id": 10, "ticketNumber": 1, "purchased": True, "buyerName": "Amina"},
                {"id": 11, "ticketNumber": 2, "purchased": False, "buyerName": None},
            ]
        )
        tickets = client.get_tickets(4)
        self.assertEqual(session.calls[-1]["url"], "http://host/draws/4/tickets")
        self.assertTrue(tickets[0].purchased)
        self.assertIsNone(tickets[1].buyer_name)

    def test_non_2xx_raises_api_error(self):
        session = DummySession(
            DummyResponse(json_data={"message": "nope"}, status_code=500, reason="Server Error")
        )
        client = RaffleClient(base_url="http://host", session=session)
        with self.assertRaises(ApiError) as ctx:
            client.get_draw(1)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.path, "/draws/1")
        self.assertIn("HTTP 500", str(ctx.exception))

    def test_transport_failure_raises_api_error(self):
        session = DummySession(error=requests.ConnectionError("network unreachable"))
        client = RaffleClient(base_url="http://host", session=session)
        with self.assertRaises(ApiError) as ctx:
            client.create_draw("Xmas", 50)
        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("network unreachable", str(ctx.exception))

    def test_malformed_body_raises_schema_error(self):
        session = DummySession(DummyResponse(json_data=[{"id": 1, "name": "x"}]))
        client = RaffleClient(base_url="http://host", session=session)
        with self.assertRaises(SchemaError):
            client.list_draws()

    def test_non_json_body_raises_api_error(self):
        session = DummySession(DummyResponse(content=b"<html>oops</html>"))
        client = RaffleClient(base_url="http://host", session=session)
        with self.assertRaises(ApiError):
            client.get_stats(1)


if __name__ == "__main__":
    unittest.main()
