"""Armory ledger: asset movement tracking for military bases."""

__version__ = "1.0.0"
