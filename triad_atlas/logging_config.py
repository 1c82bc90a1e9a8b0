"""Centralized logging configuration for Triad Atlas.

This module provides a consistent way to configure logging across the package
and its command-line interface.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "triad_atlas": logging.INFO,
    "triad_atlas.validation": logging.INFO,
    "triad_atlas.note_utils": logging.INFO,
    "triad_atlas.note_matcher": logging.INFO,  # Set to DEBUG for detailed matching info
    "triad_atlas.intervals": logging.INFO,
    "triad_atlas.triads": logging.INFO,
    "triad_atlas.fretboard": logging.INFO,
    # Dataset and queries
    "triad_atlas.database": logging.INFO,
    "triad_atlas.core": logging.INFO,
    "triad_atlas.cli": logging.WARNING,  # CLI prints its own output
    "triad_atlas.logger": logging.WARNING,  # Logger module itself should be quiet
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'triad_atlas' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Single shared console handler; stdout is reserved for CLI output
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stderr)
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
                if module_name.startswith("triad_atlas"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("triad_atlas").debug("Logging configuration complete")
