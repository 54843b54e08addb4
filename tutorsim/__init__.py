"""Tutoring simulator transcript processing."""

__version__ = "1.0.0"
