"""Cauldron - local SQLite schema synchronizer and table cache."""

__version__ = "0.1.0"
