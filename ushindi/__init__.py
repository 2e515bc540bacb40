"""Client for the Ushindi Seme prize draw API."""

__version__ = "0.1.0"
