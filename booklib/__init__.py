"""Tiered client-side storage for a catalog of user-owned documents."""

__version__ = "0.1.0"
