"""Core components for triad_frets."""

from .config import ConfigManager

__all__ = ["ConfigManager"]
