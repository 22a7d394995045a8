"""Deterministic grid-based turn-based combat engine."""

__version__ = "0.1.0"
