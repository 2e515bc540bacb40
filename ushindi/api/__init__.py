"""HTTP access to the raffle API."""

from .client import RaffleClient

__all__ = ["RaffleClient"]
