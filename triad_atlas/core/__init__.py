"""Core components for the Triad Atlas application."""

from .config import ConfigManager
from .factory import ComponentFactory

__all__ = ["ConfigManager", "ComponentFactory"]
