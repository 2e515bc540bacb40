from __future__ import annotations

from ushindi.api.client import RaffleClient
from ushindi.logging_config import configure_logging
from ushindi.views import DrawListView


DEMO_DRAWS = [
    # (name, total tickets, purchases as (buyer, ticket numbers))
    ("Christmas Raffle", 50, [("Amina", [3, 7]), ("Baraka", [12, 13, 14])]),
    ("Staff Lunch Draw", 20, [("Wanjiru", [1]), ("Otieno", [5, 6])]),
    ("New Year Draw", 100, []),
]


def seed(client: RaffleClient) -> list[int]:
    """Create the demo draws and purchases through the API.

    Returns the ids of the draws that were created.
    """
    view = DrawListView(client)
    created_ids: list[int] = []

    for name, total, purchases in DEMO_DRAWS:
        if not view.create_draw(name, total):
            raise RuntimeError(f"Failed to create demo draw {name!r}")
        draw = next((d for d in reversed(view.draws) if d.name == name), None)
        if draw is None:
            raise RuntimeError(f"Demo draw {name!r} missing after creation")
        created_ids.append(draw.id)

        detail = view.select(draw.id)
        detail.load()
        for buyer, numbers in purchases:
            for number in numbers:
                detail.toggle_ticket(number)
            if not detail.purchase(buyer):
                raise RuntimeError(f"Failed to purchase {numbers} in {name!r}")
        detail.close()

    return created_ids


def main() -> None:
    """Seed the configured raffle API with sample draws."""
    configure_logging()
    ids = seed(RaffleClient())
    print("Seeded draws:", ", ".join(str(i) for i in ids))


if __name__ == "__main__":
    main()
