"""Command-line interface for Triad Atlas."""

from .main import cli, main

__all__ = ["cli", "main"]
