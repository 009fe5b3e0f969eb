"""Availability, pricing and booking administration for a small property."""

__version__ = "1.0.0"
