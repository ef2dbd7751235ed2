"""Daggerboard - campaign state backend for a game master dashboard."""

__version__ = "0.3.0"
