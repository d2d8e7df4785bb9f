"""Centralized logging configuration for triad_frets.

This module provides a consistent way to configure logging across the package.
"""

import logging
import sys
from typing import Dict, Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "triad_frets": logging.INFO,
    "triad_frets.solver": logging.INFO,  # Set to DEBUG to trace every solve
    "triad_frets.note_utils": logging.INFO,
    "triad_frets.chord_selection": logging.INFO,
    "triad_frets.core": logging.WARNING,  # Config file chatter stays out of CLI output
    "triad_frets.cli": logging.WARNING,
    "triad_frets.logger": logging.WARNING,  # Logger module itself should be quiet
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None

# Cache for loggers to avoid duplicate setup
_logger_cache: Dict[str, logging.Logger] = {}


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'triad_frets' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a fresh shared console handler bound to the current stdout
    _console_handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("triad_frets"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if _console_handler not in logger.handlers:
            logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("triad_frets").debug("Logging configuration complete")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    The logger name must be explicitly listed in MODULE_LOG_LEVELS.

    Args:
        name: The full module name (e.g., 'triad_frets.solver')

    Returns:
        A configured logger instance

    Raises:
        ValueError: If the module name is not in MODULE_LOG_LEVELS
    """
    if name in _logger_cache:
        return _logger_cache[name]

    if name not in MODULE_LOG_LEVELS:
        raise ValueError(
            f"Logger '{name}' not found in MODULE_LOG_LEVELS. "
            "Please add it to the configuration."
        )

    logger = logging.getLogger(name)
    logger.setLevel(MODULE_LOG_LEVELS[name])

    # Only add handler if not already attached
    if _console_handler and not any(
        isinstance(h, type(_console_handler)) for h in logger.handlers
    ):
        logger.addHandler(_console_handler)

    logger.propagate = False
    _logger_cache[name] = logger
    return logger
