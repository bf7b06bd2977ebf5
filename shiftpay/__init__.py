"""Shift pay calculation engine and pay period resolver."""

__version__ = "0.1.0"
