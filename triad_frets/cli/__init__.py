"""Command-line interface for triad_frets."""

from .main import main as cli_main

__all__ = ["cli_main"]
