"""Workplace register snapshot comparison."""

__version__ = "0.1.0"
