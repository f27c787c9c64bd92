"""Ride matching, fare estimation and simulated driver tracking."""

__version__ = "0.1.0"
