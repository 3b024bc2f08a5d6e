"""Gazetteer Lite - local SQLite name store and command-line interface."""

__version__ = "0.1.0"
