"""Lunar calendar astronomy service."""

__version__ = "0.1.0"
